"""Unit tests for scenario analysis, cash flow health and risk assessment"""

import pytest
from datetime import date, timedelta
from cashflow_forecast.domain.models import (
    CashFlowHealth,
    ForecastPeriod,
    RiskLevel,
    ScenarioOutcome,
    Transaction,
    TransactionType,
)
from cashflow_forecast.domain.forecast import generate_forecast
from cashflow_forecast.domain.scenarios import (
    assess_cash_flow_health,
    assess_risk,
    identify_key_events,
    income_concentration,
    perform_scenario_analysis,
)
from cashflow_forecast.domain.summary import balance_at_day, calculate_burn_rate


def _outcome(balance_30d: int, balance_90d: int, balance_1y: int, health=CashFlowHealth.GOOD) -> ScenarioOutcome:
    return ScenarioOutcome(
        name="realistic",
        balance_at_30d_cents=balance_30d,
        balance_at_90d_cents=balance_90d,
        balance_at_1y_cents=balance_1y,
        cash_flow_health=health,
        key_events=[],
    )


def _period(day: date, income: int, expense: int) -> ForecastPeriod:
    return ForecastPeriod(
        date=day,
        predicted_income_cents=income,
        predicted_expense_cents=expense,
        predicted_balance_cents=0,
        confidence=0.5,
    )


def _txn(txn_id, amount, txn_type, description):
    return Transaction(
        transaction_id=txn_id,
        date=date(2025, 6, 1),
        description=description,
        category="test",
        amount_cents=amount,
        type=txn_type,
    )


@pytest.mark.parametrize(
    "income,expense,expected",
    [
        (150000, 100000, CashFlowHealth.EXCELLENT),
        (120000, 100000, CashFlowHealth.GOOD),
        (100000, 100000, CashFlowHealth.FAIR),
        (99999, 100000, CashFlowHealth.POOR),
        (0, 0, CashFlowHealth.POOR),
    ],
)
def test_cash_flow_health_buckets(income, expense, expected):
    """Test ratio thresholds 1.5 / 1.2 / 1.0"""
    assert assess_cash_flow_health(income, expense) == expected


def test_cash_flow_health_zero_expense_with_income():
    """Test zero expense treated as a divisor of one"""
    assert assess_cash_flow_health(500, 0) == CashFlowHealth.EXCELLENT


def test_balance_at_day_bounds():
    """Test 1-based lookup and None outside the horizon"""
    periods = [_period(date(2026, 1, d), 0, 0) for d in range(1, 4)]
    periods[2].predicted_balance_cents = 777

    assert balance_at_day(periods, 3) == 777
    assert balance_at_day(periods, 4) is None
    assert balance_at_day(periods, 0) is None


def test_burn_rate():
    """Test burn rate only for negative net flow"""
    assert calculate_burn_rate(300000, -100000) == 3.0
    assert calculate_burn_rate(300000, 0) is None
    assert calculate_burn_rate(300000, 5000) is None


def test_identify_key_events():
    """Test days moving the balance more than $1000 either way"""
    start = date(2026, 1, 2)
    periods = [
        _period(start, 250000, 0),
        _period(start + timedelta(days=1), 0, 50000),
        _period(start + timedelta(days=2), 0, 180000),
        _period(start + timedelta(days=3), 100000, 0),
    ]

    events = identify_key_events(periods)

    assert [e.description for e in events] == ["Significant income event", "Large expense event"]
    assert events[0].balance_impact_cents == 250000
    assert events[1].balance_impact_cents == -180000
    assert events[1].date == start + timedelta(days=2)


def test_identify_key_events_capped_at_five():
    """Test only the first five events are kept"""
    start = date(2026, 1, 2)
    periods = [_period(start + timedelta(days=i), 200000, 0) for i in range(8)]

    events = identify_key_events(periods)

    assert len(events) == 5
    assert events[-1].date == start + timedelta(days=4)


def test_income_concentration():
    """Test share of income from the largest normalized source"""
    txns = [
        _txn("a", 80000, TransactionType.INCOME, "Payroll 01"),
        _txn("b", 80000, TransactionType.INCOME, "PAYROLL 02"),
        _txn("c", 40000, TransactionType.INCOME, "Etsy"),
        _txn("d", 99999, TransactionType.EXPENSE, "Rent"),
    ]
    assert income_concentration(txns) == 0.8
    assert income_concentration([]) == 0.0


def test_assess_risk_high():
    """Test three risk factors give a high level with mitigations"""
    txns = [
        _txn("a", 300000, TransactionType.INCOME, "Paycheck"),
        _txn("b", 10000, TransactionType.EXPENSE, "Coffee"),
        _txn("c", 200000, TransactionType.EXPENSE, "Rent"),
    ]

    risk = assess_risk(txns, 500000, _outcome(400000, 100000, 0))

    assert risk.level == RiskLevel.HIGH
    assert risk.factors == [
        "Projected significant balance decline",
        "High dependency on single income source",
        "High expense volatility",
    ]
    assert len(risk.mitigation) == 3


def test_assess_risk_low():
    """Test diversified income, steady expenses and stable balance"""
    txns = [
        _txn("a", 100000, TransactionType.INCOME, "Paycheck"),
        _txn("b", 100000, TransactionType.INCOME, "Consulting"),
        _txn("c", 50000, TransactionType.EXPENSE, "Rent"),
        _txn("d", 50000, TransactionType.EXPENSE, "Rent"),
    ]

    risk = assess_risk(txns, 500000, _outcome(500000, 480000, 450000))

    assert risk.level == RiskLevel.LOW
    assert risk.factors == []
    assert risk.mitigation == []


def test_scenario_ordering(monthly_history, as_of):
    """Test pessimistic <= realistic <= optimistic at every checkpoint"""
    analysis = perform_scenario_analysis(monthly_history, 50000, as_of=as_of)

    for attr in ("balance_at_30d_cents", "balance_at_90d_cents", "balance_at_1y_cents"):
        assert getattr(analysis.pessimistic, attr) <= getattr(analysis.realistic, attr)
        assert getattr(analysis.realistic, attr) <= getattr(analysis.optimistic, attr)

    assert [analysis.optimistic.name, analysis.realistic.name, analysis.pessimistic.name] == [
        "optimistic",
        "realistic",
        "pessimistic",
    ]


def test_scenario_surplus_history(monthly_history, as_of):
    """Test surplus history: single income source risk and invest recommendation"""
    analysis = perform_scenario_analysis(monthly_history, 500000, as_of=as_of)

    assert analysis.risk.level == RiskLevel.MEDIUM
    assert analysis.risk.factors == ["High dependency on single income source"]
    assert "Consider investing excess funds to maximize growth potential" in analysis.recommendations
    assert "Build an emergency fund to protect against financial shocks" not in analysis.recommendations
    assert analysis.optimistic.cash_flow_health == CashFlowHealth.EXCELLENT


def test_scenario_deficit_history(deficit_history, as_of):
    """Test shrinking balance triggers decline risk and budgeting advice"""
    analysis = perform_scenario_analysis(deficit_history, 300000, as_of=as_of)

    assert "Projected significant balance decline" in analysis.risk.factors
    assert analysis.realistic.cash_flow_health == CashFlowHealth.POOR
    assert analysis.recommendations[:2] == [
        "Consider reducing expenses or increasing income to maintain financial stability",
        "Build an emergency fund to protect against financial shocks",
    ]
    assert "Review and optimize your budget to improve cash flow health" in analysis.recommendations
    assert "Consider investing excess funds to maximize growth potential" not in analysis.recommendations


def test_scenario_checkpoints_read_from_one_year_forecast(deficit_history, as_of):
    """Test 30/90/365-day balances come from the realistic forecast, never the starting balance"""
    forecast = generate_forecast(deficit_history, 300000, 365, as_of=as_of)

    analysis = perform_scenario_analysis(deficit_history, 300000, as_of=as_of)

    assert analysis.realistic.balance_at_30d_cents == forecast.periods[29].predicted_balance_cents
    assert analysis.realistic.balance_at_90d_cents == forecast.periods[89].predicted_balance_cents
    assert analysis.realistic.balance_at_1y_cents == forecast.periods[364].predicted_balance_cents
    assert analysis.realistic.balance_at_90d_cents != 300000
    assert "Projected significant balance decline" in analysis.risk.factors


def test_scenario_horizon_not_configurable(monthly_history, as_of):
    """Test scenarios always project one year"""
    with pytest.raises(TypeError):
        perform_scenario_analysis(monthly_history, 50000, as_of=as_of, horizon_days=30)
