"""Unit tests for seasonal aggregation and trend estimation"""

from datetime import date
from cashflow_forecast.domain.models import Transaction, TransactionType
from cashflow_forecast.domain.seasonal import analyze_seasonal_patterns, compare_seasons
from cashflow_forecast.domain.trends import (
    analyze_trends,
    calculate_growth_rate,
    calculate_volatility,
    monthly_totals,
)


def _txn(txn_id, day, amount, txn_type=TransactionType.EXPENSE):
    return Transaction(
        transaction_id=txn_id,
        date=day,
        description="test",
        category="test",
        amount_cents=amount,
        type=txn_type,
    )


def test_seasonal_always_twelve_months():
    """Test one entry per calendar month even without data"""
    patterns = analyze_seasonal_patterns([])

    assert [p.month for p in patterns] == list(range(12))
    assert all(p.confidence == 0.0 and p.sample_count == 0 for p in patterns)


def test_seasonal_averages_across_years(monthly_history):
    """Test per-month averages ignore the year and count samples"""
    patterns = analyze_seasonal_patterns(monthly_history)

    march = patterns[2]
    assert march.average_income_cents == 300000
    assert march.average_expense_cents == 200000
    assert march.sample_count == 6
    assert march.confidence == 0.6


def test_seasonal_confidence_caps_at_one():
    """Test confidence reaches 1.0 at ten samples"""
    txns = [_txn(f"d{i}", date(2025, 12, i + 1), 1000) for i in range(15)]

    december = analyze_seasonal_patterns(txns)[11]

    assert december.sample_count == 15
    assert december.confidence == 1.0


def test_compare_seasons_identifies_holiday_spending():
    """Test winter flagged as highest spending season"""
    txns = [
        _txn("w1", date(2024, 12, 10), 90000),
        _txn("s1", date(2025, 6, 10), 10000),
        _txn("i1", date(2025, 6, 1), 50000, TransactionType.INCOME),
    ]

    comparison = compare_seasons(txns)

    assert [s.season for s in comparison.seasons] == ["spring", "summer", "fall", "winter"]
    assert comparison.insights[0].startswith("Highest spending season: winter")
    assert comparison.insights[2].startswith("Best cash flow season: summer")
    winter = comparison.seasons[3]
    assert winter.avg_monthly_expense_cents == 30000
    assert winter.avg_monthly_net_cents == -30000


def test_growth_rate_mean_of_relative_changes():
    """Test growth averaged over consecutive pairs"""
    assert abs(calculate_growth_rate([100, 110, 121]) - 0.1) < 1e-9


def test_growth_rate_skips_zero_previous():
    """Test zero base months contribute no growth but still count"""
    assert calculate_growth_rate([0, 100, 200]) == 0.5
    assert calculate_growth_rate([500]) == 0.0


def test_volatility_defaults_and_cap():
    """Test unknown volatility is 0.5 and real values cap at 1"""
    assert calculate_volatility([5.0]) == 0.5
    assert calculate_volatility([0.0, 0.0]) == 0.5
    assert calculate_volatility([100.0, 100.0]) == 0.0
    assert calculate_volatility([1.0, 1000.0, 1.0, 1.0, 1.0]) == 1.0


def test_monthly_totals_chronological():
    """Test totals bucketed by calendar month in date order"""
    txns = [
        _txn("b", date(2025, 2, 3), 700),
        _txn("a", date(2025, 1, 9), 300, TransactionType.INCOME),
        _txn("c", date(2025, 1, 20), 100),
    ]

    assert monthly_totals(txns) == [(300, 100), (0, 700)]


def test_trends_sparse_history():
    """Test a single month yields a flat low-confidence estimate"""
    trend = analyze_trends([_txn("a", date(2025, 1, 9), 300)])

    assert trend.income_growth_rate == 0.0
    assert trend.expense_growth_rate == 0.0
    assert trend.volatility == 0.5
    assert trend.confidence == 0.2
    assert trend.months_observed == 1


def test_trends_stable_history(monthly_history):
    """Test steady paycheck and rent give zero growth and confident estimate"""
    trend = analyze_trends(monthly_history)

    assert trend.months_observed == 36
    assert trend.income_growth_rate == 0.0
    assert trend.expense_growth_rate == 0.0
    # pstdev 50000 / mean 250000
    assert abs(trend.volatility - 0.2) < 1e-9
    assert abs(trend.confidence - 0.8) < 1e-9
