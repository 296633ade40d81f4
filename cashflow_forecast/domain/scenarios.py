"""Scenario engine - optimistic / realistic / pessimistic outcomes and risk assessment"""

from collections import defaultdict
from datetime import date
from statistics import fmean, pstdev
from typing import Dict, List, Optional, Tuple

from cashflow_forecast.domain.forecast import generate_forecast
from cashflow_forecast.domain.models import (
    CashFlowHealth,
    ForecastPeriod,
    KeyEvent,
    RiskAssessment,
    RiskLevel,
    ScenarioAnalysis,
    ScenarioOutcome,
    Transaction,
    TransactionType,
)
from cashflow_forecast.domain.patterns import normalize_description
from cashflow_forecast.domain.summary import balance_at_day
from cashflow_forecast.domain.thresholds import (
    BALANCE_DECLINE_RATIO,
    EMERGENCY_FUND_CENTS,
    EXCELLENT_RATIO,
    EXPENSE_VOLATILITY_LIMIT,
    FAIR_RATIO,
    GOOD_RATIO,
    GROWTH_INVEST_MULTIPLE,
    HIGH_RISK_FACTOR_COUNT,
    INCOME_CONCENTRATION_LIMIT,
    INCOME_VARIABILITY_LIMIT,
    KEY_EVENT_THRESHOLD_CENTS,
    MAX_KEY_EVENTS,
    OPTIMISTIC_MULTIPLIERS,
    PESSIMISTIC_MULTIPLIERS,
    REALISTIC_MULTIPLIERS,
    SCENARIO_HORIZON_DAYS,
    SHORT_TERM_DECLINE_RATIO,
)
from cashflow_forecast.domain.validation import validate_transactions


def assess_cash_flow_health(avg_income_cents: int, avg_expense_cents: int) -> CashFlowHealth:
    """
    Bucket the income/expense ratio.

    - >= 1.5: excellent
    - >= 1.2: good
    - >= 1.0: fair
    - below:  poor
    """
    ratio = avg_income_cents / (avg_expense_cents or 1)
    if ratio >= EXCELLENT_RATIO:
        return CashFlowHealth.EXCELLENT
    elif ratio >= GOOD_RATIO:
        return CashFlowHealth.GOOD
    elif ratio >= FAIR_RATIO:
        return CashFlowHealth.FAIR
    else:
        return CashFlowHealth.POOR


def identify_key_events(periods: List[ForecastPeriod]) -> List[KeyEvent]:
    """First few days whose net balance movement exceeds $1000 either way"""
    events = []
    for period in periods:
        change = period.predicted_income_cents - period.predicted_expense_cents
        if abs(change) > KEY_EVENT_THRESHOLD_CENTS:
            events.append(
                KeyEvent(
                    date=period.date,
                    description="Significant income event" if change > 0 else "Large expense event",
                    balance_impact_cents=change,
                )
            )
        if len(events) == MAX_KEY_EVENTS:
            break
    return events


def run_scenario(
    name: str,
    transactions: List[Transaction],
    current_balance_cents: int,
    multipliers: Tuple[float, float],
    as_of: date,
) -> ScenarioOutcome:
    """
    Forecast one scenario variant with uniformly scaled income and expense.

    Always projects SCENARIO_HORIZON_DAYS, so every checkpoint (30, 90, 365)
    is read from the forecast itself.
    """
    income_multiplier, expense_multiplier = multipliers
    forecast = generate_forecast(
        transactions,
        current_balance_cents,
        SCENARIO_HORIZON_DAYS,
        as_of=as_of,
        income_multiplier=income_multiplier,
        expense_multiplier=expense_multiplier,
    )

    return ScenarioOutcome(
        name=name,
        balance_at_30d_cents=balance_at_day(forecast.periods, 30),
        balance_at_90d_cents=balance_at_day(forecast.periods, 90),
        balance_at_1y_cents=balance_at_day(forecast.periods, 365),
        cash_flow_health=assess_cash_flow_health(
            forecast.summary.avg_monthly_income_cents,
            forecast.summary.avg_monthly_expense_cents,
        ),
        key_events=identify_key_events(forecast.periods),
    )


def _coefficient_of_variation(amounts: List[int]) -> float:
    if len(amounts) < 2:
        return 0.0
    mean = fmean(amounts)
    return pstdev(amounts) / mean if mean > 0 else 0.0


def income_variability(transactions: List[Transaction]) -> float:
    return _coefficient_of_variation([t.amount_cents for t in transactions if t.type == TransactionType.INCOME])


def expense_volatility(transactions: List[Transaction]) -> float:
    return _coefficient_of_variation([t.amount_cents for t in transactions if t.type == TransactionType.EXPENSE])


def income_concentration(transactions: List[Transaction]) -> float:
    """Share of total income coming from the single largest source"""
    by_source: Dict[str, int] = defaultdict(int)
    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            by_source[normalize_description(txn.description)] += txn.amount_cents

    total = sum(by_source.values())
    if total <= 0:
        return 0.0
    return max(by_source.values()) / total


def _declined_by(start_cents: int, end_cents: int, ratio: float) -> bool:
    """True when end is lower than start by more than ratio of |start|"""
    return start_cents - end_cents > abs(start_cents) * ratio


def assess_risk(
    transactions: List[Transaction],
    current_balance_cents: int,
    realistic: ScenarioOutcome,
) -> RiskAssessment:
    """
    Aggregate independent risk factors into a level.

    Factors:
    - Realistic 90-day balance down more than 50%
    - Over 80% of income from a single source
    - Expense amounts with a coefficient of variation above 0.4

    Level: 0 factors -> low, 1-2 -> medium, 3+ -> high
    """
    factors = []
    mitigation = []

    if _declined_by(current_balance_cents, realistic.balance_at_90d_cents, BALANCE_DECLINE_RATIO):
        factors.append("Projected significant balance decline")
        mitigation.append("Create a detailed budget and spending plan")

    if income_concentration(transactions) > INCOME_CONCENTRATION_LIMIT:
        factors.append("High dependency on single income source")
        mitigation.append("Develop alternative income streams")

    if expense_volatility(transactions) > EXPENSE_VOLATILITY_LIMIT:
        factors.append("High expense volatility")
        mitigation.append("Create emergency fund for unexpected expenses")

    if len(factors) >= HIGH_RISK_FACTOR_COUNT:
        level = RiskLevel.HIGH
    elif factors:
        level = RiskLevel.MEDIUM
    else:
        level = RiskLevel.LOW

    return RiskAssessment(level=level, factors=factors, mitigation=mitigation)


def generate_recommendations(
    optimistic: ScenarioOutcome,
    realistic: ScenarioOutcome,
    pessimistic: ScenarioOutcome,
    transactions: List[Transaction],
    current_balance_cents: int,
) -> List[str]:
    """Independent threshold checks; each may add one recommendation"""
    recommendations = []

    if _declined_by(current_balance_cents, realistic.balance_at_30d_cents, 1 - SHORT_TERM_DECLINE_RATIO):
        recommendations.append("Consider reducing expenses or increasing income to maintain financial stability")

    if pessimistic.balance_at_90d_cents < EMERGENCY_FUND_CENTS:
        recommendations.append("Build an emergency fund to protect against financial shocks")

    if current_balance_cents > 0 and optimistic.balance_at_1y_cents > current_balance_cents * GROWTH_INVEST_MULTIPLE:
        recommendations.append("Consider investing excess funds to maximize growth potential")

    if realistic.cash_flow_health == CashFlowHealth.POOR:
        recommendations.append("Review and optimize your budget to improve cash flow health")

    if income_variability(transactions) > INCOME_VARIABILITY_LIMIT:
        recommendations.append("Consider diversifying income sources to reduce financial volatility")

    return recommendations


def perform_scenario_analysis(
    transactions: List[Transaction],
    current_balance_cents: int,
    as_of: Optional[date] = None,
) -> ScenarioAnalysis:
    """
    Main entry point: forecast all three scenarios one year out on the same history.

    Optimistic scales income x1.15 and expense x0.9, pessimistic income x0.9
    and expense x1.15. Scaling is applied to every projected day, so
    pessimistic <= realistic <= optimistic holds at each day.
    """
    validate_transactions(transactions)
    as_of = as_of or date.today()

    optimistic = run_scenario("optimistic", transactions, current_balance_cents, OPTIMISTIC_MULTIPLIERS, as_of)
    realistic = run_scenario("realistic", transactions, current_balance_cents, REALISTIC_MULTIPLIERS, as_of)
    pessimistic = run_scenario("pessimistic", transactions, current_balance_cents, PESSIMISTIC_MULTIPLIERS, as_of)

    return ScenarioAnalysis(
        optimistic=optimistic,
        realistic=realistic,
        pessimistic=pessimistic,
        recommendations=generate_recommendations(
            optimistic, realistic, pessimistic, transactions, current_balance_cents
        ),
        risk=assess_risk(transactions, current_balance_cents, realistic),
    )
