"""Trend estimation - growth and volatility across monthly totals"""

import math
from statistics import fmean, pstdev
from typing import Dict, List, Tuple

from cashflow_forecast.domain.models import Transaction, TransactionType, TrendEstimate
from cashflow_forecast.domain.thresholds import (
    DEFAULT_VOLATILITY,
    SPARSE_TREND_CONFIDENCE,
    TREND_FULL_CONFIDENCE_MONTHS,
)
from cashflow_forecast.utils.date_utils import month_key


def monthly_totals(transactions: List[Transaction]) -> List[Tuple[int, int]]:
    """Chronological (income_cents, expense_cents) totals per calendar month"""
    totals: Dict[Tuple[int, int], List[int]] = {}
    for txn in sorted(transactions, key=lambda t: t.date):
        bucket = totals.setdefault(month_key(txn.date), [0, 0])
        if txn.type == TransactionType.INCOME:
            bucket[0] += txn.amount_cents
        else:
            bucket[1] += txn.amount_cents
    return [(income, expense) for income, expense in totals.values()]


def calculate_growth_rate(values: List[int]) -> float:
    """
    Mean period-over-period relative change.

    Pairs whose previous value is 0 are skipped and count as zero growth.
    """
    if len(values) < 2:
        return 0.0

    total_growth = 0.0
    for previous, current in zip(values, values[1:]):
        if previous > 0:
            total_growth += (current - previous) / previous

    return total_growth / (len(values) - 1)


def calculate_volatility(values: List[float]) -> float:
    """Coefficient of variation capped at 1; 0.5 when unknown"""
    if len(values) < 2:
        return DEFAULT_VOLATILITY

    mean = fmean(values)
    if mean <= 0:
        return DEFAULT_VOLATILITY

    volatility = min(pstdev(values) / mean, 1.0)
    return volatility if math.isfinite(volatility) else DEFAULT_VOLATILITY


def analyze_trends(transactions: List[Transaction]) -> TrendEstimate:
    """
    Estimate income/expense growth and volatility from monthly aggregates.

    Confidence = min(months / 6, 1) * (1 - volatility). With fewer than two
    months of data the estimate is flat with low confidence.
    """
    months = monthly_totals(transactions)
    if len(months) < 2:
        return TrendEstimate(
            income_growth_rate=0.0,
            expense_growth_rate=0.0,
            volatility=DEFAULT_VOLATILITY,
            confidence=SPARSE_TREND_CONFIDENCE,
            months_observed=len(months),
        )

    incomes = [income for income, _ in months]
    expenses = [expense for _, expense in months]
    volatility = calculate_volatility([float(v) for v in incomes + expenses])
    confidence = min(len(months) / TREND_FULL_CONFIDENCE_MONTHS, 1.0) * (1.0 - volatility)

    return TrendEstimate(
        income_growth_rate=calculate_growth_rate(incomes),
        expense_growth_rate=calculate_growth_rate(expenses),
        volatility=volatility,
        confidence=confidence,
        months_observed=len(months),
    )
