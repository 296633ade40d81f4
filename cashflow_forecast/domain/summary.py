"""Summary metrics, insights and warnings derived from a forecast"""

from datetime import date
from statistics import fmean
from typing import List, Optional

from cashflow_forecast.domain.models import (
    ForecastPeriod,
    ForecastSummary,
    RecurringPattern,
    Transaction,
    TransactionType,
    TrendEstimate,
)
from cashflow_forecast.domain.thresholds import (
    DAYS_PER_MONTH,
    HIGH_CASH_FLOW_VOLATILITY,
    INCOME_GROWTH_INSIGHT_RATE,
    LOW_BALANCE_CENTS,
    LOW_CONFIDENCE,
    RELIABLE_PATTERN_CONFIDENCE,
    TREND_INSIGHT_CONFIDENCE,
    URGENT_BURN_RATE_MONTHS,
)
from cashflow_forecast.domain.trends import calculate_volatility


def _dollars(cents: int) -> str:
    return f"${cents / 100:,.2f}"


def balance_at_day(periods: List[ForecastPeriod], day: int) -> Optional[int]:
    """Projected balance on forecast day N (1-based); None beyond the horizon"""
    if day < 1 or day > len(periods):
        return None
    return periods[day - 1].predicted_balance_cents


def monthly_average(
    transactions: List[Transaction],
    txn_type: TransactionType,
    as_of: date,
    multiplier: float = 1.0,
) -> int:
    """Total for the type spread over the months since its oldest transaction (min 1)"""
    relevant = [t for t in transactions if t.type == txn_type]
    if not relevant:
        return 0

    total = sum(t.amount_cents for t in relevant)
    oldest = min(t.date for t in relevant)
    months_span = max(1.0, (as_of - oldest).days / DAYS_PER_MONTH)
    return round(total * multiplier / months_span)


def calculate_burn_rate(current_balance_cents: int, net_monthly_flow_cents: int) -> Optional[float]:
    """Months until the balance reaches zero; None when net flow is not negative"""
    if net_monthly_flow_cents >= 0:
        return None
    return current_balance_cents / abs(net_monthly_flow_cents)


def build_summary(
    periods: List[ForecastPeriod],
    transactions: List[Transaction],
    current_balance_cents: int,
    as_of: date,
    insufficient_history: bool = False,
    income_multiplier: float = 1.0,
    expense_multiplier: float = 1.0,
) -> ForecastSummary:
    """
    Headline metrics for a forecast.

    30/90-day balances read periods[29] and periods[89] and are None when the
    horizon is shorter. Monthly averages come from history, not the forecast.
    """
    avg_income = monthly_average(transactions, TransactionType.INCOME, as_of, income_multiplier)
    avg_expense = monthly_average(transactions, TransactionType.EXPENSE, as_of, expense_multiplier)

    return ForecastSummary(
        current_balance_cents=current_balance_cents,
        projected_balance_30d_cents=balance_at_day(periods, 30),
        projected_balance_90d_cents=balance_at_day(periods, 90),
        avg_monthly_income_cents=avg_income,
        avg_monthly_expense_cents=avg_expense,
        burn_rate_months=calculate_burn_rate(current_balance_cents, avg_income - avg_expense),
        confidence_score=fmean(p.confidence for p in periods) if periods else 0.0,
        insufficient_history=insufficient_history,
    )


def build_insights(
    periods: List[ForecastPeriod],
    trend: TrendEstimate,
    patterns: List[RecurringPattern],
) -> List[str]:
    insights = []

    if len(periods) >= 30:
        change = periods[29].predicted_balance_cents - periods[0].predicted_balance_cents
        if change > 0:
            insights.append(f"Your balance is projected to grow by {_dollars(change)} over the next 30 days")
        else:
            insights.append(
                f"Your balance is projected to decrease by {_dollars(abs(change))} over the next 30 days"
            )

    reliable = [p for p in patterns if p.confidence > RELIABLE_PATTERN_CONFIDENCE]
    if reliable:
        insights.append(
            f"Identified {len(reliable)} reliable recurring transactions that help predict your cash flow"
        )

    if trend.confidence > TREND_INSIGHT_CONFIDENCE:
        if trend.income_growth_rate > INCOME_GROWTH_INSIGHT_RATE:
            insights.append("Your income shows a positive growth trend")
        if trend.expense_growth_rate > trend.income_growth_rate:
            insights.append(
                "Your expenses are growing faster than your income - consider reviewing your spending"
            )

    return insights


def build_warnings(periods: List[ForecastPeriod], summary: ForecastSummary) -> List[str]:
    warnings = []

    if summary.insufficient_history:
        warnings.append(
            "Less than 30 days of transaction history is available - treat this forecast as a rough estimate"
        )

    balance_30d = summary.projected_balance_30d_cents
    if balance_30d is not None and balance_30d < LOW_BALANCE_CENTS:
        warnings.append(
            "Your projected balance in 30 days is quite low - consider increasing income or reducing expenses"
        )

    burn_rate = summary.burn_rate_months
    if burn_rate is not None and 0 < burn_rate < URGENT_BURN_RATE_MONTHS:
        warnings.append(f"At current spending rate, your balance may reach zero in {burn_rate:.1f} months")

    if summary.confidence_score < LOW_CONFIDENCE:
        warnings.append("Forecast confidence is low due to limited or inconsistent transaction data")

    changes = [
        float(current.predicted_balance_cents - previous.predicted_balance_cents)
        for previous, current in zip(periods, periods[1:])
    ]
    if calculate_volatility(changes) > HIGH_CASH_FLOW_VOLATILITY:
        warnings.append("High volatility detected in your cash flow - consider building an emergency fund")

    return warnings
