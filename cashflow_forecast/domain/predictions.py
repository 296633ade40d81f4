"""Balance predictions at milestone days with optimistic/pessimistic bands"""

from datetime import date
from statistics import fmean, pstdev
from typing import Dict, List, Optional, Tuple

from cashflow_forecast.domain.forecast import generate_forecast
from cashflow_forecast.domain.models import (
    BalancePrediction,
    ForecastResult,
    PredictionFactor,
    RecurringPattern,
    Transaction,
    TransactionType,
)
from cashflow_forecast.domain.summary import monthly_average
from cashflow_forecast.domain.thresholds import (
    BALANCE_BAND_RATE,
    DEFAULT_BALANCE_VOLATILITY,
    FREQUENCY_PERIOD_DAYS,
    HOLIDAY_FACTOR_PROBABILITY,
    HOLIDAY_MIN_WINDOW_DAYS,
    HOLIDAY_SPEND_SHARE,
    MAX_PREDICTION_FACTORS,
    PREDICTION_MILESTONE_DAYS,
)
from cashflow_forecast.utils.date_utils import month_index, month_key

HOLIDAY_MONTHS = (10, 11)  # November, December


def historical_balance_volatility(transactions: List[Transaction]) -> float:
    """
    Coefficient of variation of month-end running balances.

    The running balance starts at zero and accumulates signed flows in date
    order. Falls back to 0.2 with fewer than two months or a non-positive mean.
    """
    month_end: Dict[Tuple[int, int], int] = {}
    running = 0
    for txn in sorted(transactions, key=lambda t: t.date):
        running += txn.amount_cents if txn.type == TransactionType.INCOME else -txn.amount_cents
        month_end[month_key(txn.date)] = running

    balances = list(month_end.values())
    if len(balances) < 2:
        return DEFAULT_BALANCE_VOLATILITY

    mean = fmean(balances)
    if mean <= 0:
        return DEFAULT_BALANCE_VOLATILITY
    return min(pstdev(balances) / mean, 1.0)


def balance_band(
    predicted_cents: int, current_balance_cents: int, volatility: float
) -> Tuple[int, int, int]:
    """(optimistic, realistic, pessimistic) around the projected change"""
    change = abs(predicted_cents - current_balance_cents)
    optimistic = predicted_cents + round(change * BALANCE_BAND_RATE)
    pessimistic = predicted_cents - round(change * (BALANCE_BAND_RATE + volatility))
    return optimistic, predicted_cents, pessimistic


def _recurring_factor(pattern: RecurringPattern, days: int) -> PredictionFactor:
    occurrences = days // FREQUENCY_PERIOD_DAYS[pattern.frequency]
    impact = pattern.average_amount_cents * occurrences
    if pattern.type == TransactionType.INCOME:
        label = "Recurring income"
    else:
        label = "Recurring expense"
        impact = -impact
    return PredictionFactor(
        kind="recurring",
        description=f"{label}: {pattern.description}",
        impact_cents=impact,
        probability=pattern.confidence,
        timeframe="short-term" if days <= 90 else "long-term",
    )


def identify_prediction_factors(
    transactions: List[Transaction],
    patterns: List[RecurringPattern],
    days: int,
    as_of: date,
) -> List[PredictionFactor]:
    """Largest drivers of the balance over a window, by absolute impact"""
    factors = [_recurring_factor(pattern, days) for pattern in patterns]

    if month_index(as_of) in HOLIDAY_MONTHS and days >= HOLIDAY_MIN_WINDOW_DAYS:
        avg_expense = monthly_average(transactions, TransactionType.EXPENSE, as_of)
        factors.append(
            PredictionFactor(
                kind="seasonal",
                description="Holiday season increased spending",
                impact_cents=-round(avg_expense * HOLIDAY_SPEND_SHARE),
                probability=HOLIDAY_FACTOR_PROBABILITY,
                timeframe="short-term",
            )
        )

    factors.sort(key=lambda f: abs(f.impact_cents), reverse=True)
    return factors[:MAX_PREDICTION_FACTORS]


def predictions_from_forecast(
    forecast: ForecastResult,
    transactions: List[Transaction],
    current_balance_cents: int,
    as_of: date,
) -> List[BalancePrediction]:
    """Milestone predictions read from an existing forecast run"""
    volatility = historical_balance_volatility(transactions)

    predictions = []
    for day in PREDICTION_MILESTONE_DAYS:
        if day > len(forecast.periods):
            continue
        period = forecast.periods[day - 1]
        optimistic, realistic, pessimistic = balance_band(
            period.predicted_balance_cents, current_balance_cents, volatility
        )
        predictions.append(
            BalancePrediction(
                date=period.date,
                day=day,
                predicted_balance_cents=period.predicted_balance_cents,
                optimistic_cents=optimistic,
                realistic_cents=realistic,
                pessimistic_cents=pessimistic,
                confidence=period.confidence,
                factors=identify_prediction_factors(
                    transactions, forecast.recurring_patterns, day, as_of
                ),
            )
        )

    return predictions


def generate_balance_predictions(
    transactions: List[Transaction],
    current_balance_cents: int,
    horizon_days: int = 365,
    as_of: Optional[date] = None,
) -> List[BalancePrediction]:
    """
    Predicted balance at 7/14/30/60/90/180/365 days (those within the horizon).

    Each prediction carries a band: optimistic adds 20% of the projected
    change, pessimistic subtracts 20% plus the historical balance volatility.
    """
    as_of = as_of or date.today()
    forecast = generate_forecast(transactions, current_balance_cents, horizon_days, as_of=as_of)
    return predictions_from_forecast(forecast, transactions, current_balance_cents, as_of)
