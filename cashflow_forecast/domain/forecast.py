"""Forecast generation - day-by-day projection of income, expense and balance"""

import logging
from datetime import date
from statistics import fmean
from typing import List, Optional, Tuple

from cashflow_forecast.domain.models import (
    ForecastPeriod,
    ForecastResult,
    RecurringPattern,
    SeasonalPattern,
    Transaction,
    TransactionType,
    TrendEstimate,
)
from cashflow_forecast.domain.patterns import detect_recurring_patterns
from cashflow_forecast.domain.seasonal import analyze_seasonal_patterns
from cashflow_forecast.domain.summary import build_insights, build_summary, build_warnings
from cashflow_forecast.domain.thresholds import (
    DAYS_PER_MONTH,
    FREQUENCY_PERIOD_DAYS,
    INSUFFICIENT_HISTORY_CONFIDENCE,
    MIN_HISTORY_DAYS,
    NO_SIGNAL_CONFIDENCE,
    OCCURRENCE_PROBABILITY_THRESHOLD,
    SEASONAL_CONFIDENCE_GATE,
    TREND_CONFIDENCE_GATE,
)
from cashflow_forecast.domain.trends import analyze_trends
from cashflow_forecast.domain.validation import validate_horizon, validate_transactions
from cashflow_forecast.utils.date_utils import advance_to, forecast_dates, month_index, span_days

logger = logging.getLogger(__name__)


def has_sufficient_history(transactions: List[Transaction]) -> bool:
    """At least 30 days between the oldest and newest transaction (inclusive)"""
    return span_days([t.date for t in transactions]) >= MIN_HISTORY_DAYS


def aligned_occurrence(pattern: RecurringPattern, as_of: date) -> date:
    """Next expected occurrence, moved forward by whole periods to on/after as_of"""
    return advance_to(pattern.next_occurrence, as_of, FREQUENCY_PERIOD_DAYS[pattern.frequency])


def occurrence_probability(day: date, pattern: RecurringPattern, as_of: date) -> float:
    """
    Phase-alignment probability that the pattern lands on a given day.

    probability = max(0, 1 - ((day - anchor) mod P) / P) * confidence

    where P is the nominal period (7/30/90/365) and anchor is the next
    occurrence aligned to the forecast start. The modulo is non-negative, so
    the anchor day scores the full confidence and the score decays linearly
    until the next aligned date.
    """
    period = FREQUENCY_PERIOD_DAYS[pattern.frequency]
    anchor = aligned_occurrence(pattern, as_of)
    phase = (day - anchor).days % period
    return max(0.0, 1.0 - phase / period) * pattern.confidence


def _trend_factor(rate: float, days_ahead: int) -> float:
    # Linear annualized adjustment, floored so amounts never turn negative
    return max(0.0, 1.0 + rate * days_ahead / 365)


def predict_day(
    day: date,
    days_ahead: int,
    as_of: date,
    recurring_patterns: List[RecurringPattern],
    seasonal_patterns: List[SeasonalPattern],
    trend: TrendEstimate,
) -> Tuple[float, float, float]:
    """
    Predict raw (unrounded) income and expense cents plus confidence for one day.

    Signals:
    1. Recurring patterns whose occurrence probability exceeds 0.1
    2. Seasonal daily share (monthly average / 30, confidence weighted) when
       that month's confidence exceeds 0.3
    3. Linear trend adjustment when trend confidence exceeds 0.4

    Confidence is the mean of contributing signal confidences, 0.3 when
    nothing contributed.
    """
    income = 0.0
    expense = 0.0
    signal_confidences = []

    for pattern in recurring_patterns:
        probability = occurrence_probability(day, pattern, as_of)
        if probability <= OCCURRENCE_PROBABILITY_THRESHOLD:
            continue
        if pattern.type == TransactionType.INCOME:
            income += pattern.average_amount_cents * probability
        else:
            expense += pattern.average_amount_cents * probability
        signal_confidences.append(pattern.confidence)

    seasonal = seasonal_patterns[month_index(day)] if len(seasonal_patterns) == 12 else None
    if seasonal is not None and seasonal.confidence > SEASONAL_CONFIDENCE_GATE:
        income += seasonal.average_income_cents / DAYS_PER_MONTH * seasonal.confidence
        expense += seasonal.average_expense_cents / DAYS_PER_MONTH * seasonal.confidence
        signal_confidences.append(seasonal.confidence)

    if trend.confidence > TREND_CONFIDENCE_GATE:
        income *= _trend_factor(trend.income_growth_rate, days_ahead)
        expense *= _trend_factor(trend.expense_growth_rate, days_ahead)

    confidence = fmean(signal_confidences) if signal_confidences else NO_SIGNAL_CONFIDENCE
    return income, expense, min(max(confidence, 0.0), 1.0)


def generate_forecast_periods(
    recurring_patterns: List[RecurringPattern],
    seasonal_patterns: List[SeasonalPattern],
    trend: TrendEstimate,
    current_balance_cents: int,
    horizon_days: int,
    as_of: date,
    sufficient_history: bool = True,
    income_multiplier: float = 1.0,
    expense_multiplier: float = 1.0,
) -> List[ForecastPeriod]:
    """
    Build exactly horizon_days chronological ForecastPeriods.

    Daily amounts are rounded to whole cents before they enter the running
    balance, so predicted_balance is an exact integer running sum seeded by
    the current balance. The balance is never floored at zero.
    """
    validate_horizon(horizon_days)

    periods = []
    running_balance = current_balance_cents

    for days_ahead, day in enumerate(forecast_dates(as_of, horizon_days), start=1):
        income, expense, confidence = predict_day(
            day, days_ahead, as_of, recurring_patterns, seasonal_patterns, trend
        )
        income_cents = round(income * income_multiplier)
        expense_cents = round(expense * expense_multiplier)

        if not sufficient_history:
            confidence = min(confidence, INSUFFICIENT_HISTORY_CONFIDENCE)

        running_balance += income_cents - expense_cents
        periods.append(
            ForecastPeriod(
                date=day,
                predicted_income_cents=income_cents,
                predicted_expense_cents=expense_cents,
                predicted_balance_cents=running_balance,
                confidence=confidence,
            )
        )

    return periods


def generate_forecast(
    transactions: List[Transaction],
    current_balance_cents: int = 0,
    horizon_days: int = 90,
    as_of: Optional[date] = None,
    income_multiplier: float = 1.0,
    expense_multiplier: float = 1.0,
) -> ForecastResult:
    """
    Main entry point: validate, estimate, project and summarize.

    Flow:
    1. Reject malformed input (InvalidInputError) before any computation
    2. Run the three independent estimators (patterns, seasonal, trend)
    3. Project day by day from as_of (default: today)
    4. Derive summary metrics, insights and warnings

    Sparse history never raises: the result comes back with confidence
    capped at 0.25 and an explicit warning.
    """
    validate_horizon(horizon_days)
    validate_transactions(transactions)
    as_of = as_of or date.today()

    recurring_patterns = detect_recurring_patterns(transactions)
    seasonal_patterns = analyze_seasonal_patterns(transactions)
    trend = analyze_trends(transactions)
    sufficient_history = has_sufficient_history(transactions)

    periods = generate_forecast_periods(
        recurring_patterns,
        seasonal_patterns,
        trend,
        current_balance_cents,
        horizon_days,
        as_of,
        sufficient_history=sufficient_history,
        income_multiplier=income_multiplier,
        expense_multiplier=expense_multiplier,
    )

    summary = build_summary(
        periods,
        transactions,
        current_balance_cents,
        as_of,
        insufficient_history=not sufficient_history,
        income_multiplier=income_multiplier,
        expense_multiplier=expense_multiplier,
    )
    insights = build_insights(periods, trend, recurring_patterns)
    warnings = build_warnings(periods, summary)

    logger.debug(
        "Forecast generated",
        extra={
            "horizon_days": horizon_days,
            "pattern_count": len(recurring_patterns),
            "confidence_score": summary.confidence_score,
        },
    )

    return ForecastResult(
        periods=periods,
        summary=summary,
        insights=insights,
        warnings=warnings,
        recurring_patterns=recurring_patterns,
        seasonal_patterns=seasonal_patterns,
        trend=trend,
    )
