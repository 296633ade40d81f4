"""Recurring pattern detection - groups history into periodic transaction series"""

import logging
import re
from collections import defaultdict
from datetime import timedelta
from statistics import fmean, pvariance
from typing import Dict, List, Optional, Sequence, Tuple

from cashflow_forecast.domain.models import Frequency, RecurringPattern, Transaction, TransactionType
from cashflow_forecast.domain.thresholds import (
    MIN_PATTERN_CONFIDENCE,
    MIN_PATTERN_OCCURRENCES,
    MONTHLY_MAX_INTERVAL_DAYS,
    QUARTERLY_MAX_INTERVAL_DAYS,
    WEEKLY_MAX_INTERVAL_DAYS,
)

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]")
_WHITESPACE = re.compile(r"\s+")


def normalize_description(description: str) -> str:
    """Grouping key: case-folded, digits stripped, whitespace collapsed"""
    text = _DIGITS.sub("", description.casefold())
    return _WHITESPACE.sub(" ", text).strip()


def classify_frequency(mean_interval_days: float) -> Frequency:
    """
    Map the mean gap between occurrences to a nominal frequency.

    Thresholds:
    - <= 10 days:  weekly
    - <= 40 days:  monthly
    - <= 120 days: quarterly
    - otherwise:   yearly
    """
    if mean_interval_days <= WEEKLY_MAX_INTERVAL_DAYS:
        return Frequency.WEEKLY
    elif mean_interval_days <= MONTHLY_MAX_INTERVAL_DAYS:
        return Frequency.MONTHLY
    elif mean_interval_days <= QUARTERLY_MAX_INTERVAL_DAYS:
        return Frequency.QUARTERLY
    else:
        return Frequency.YEARLY


def _dispersion(values: Sequence[float]) -> float:
    """Variance relative to the squared mean; 1.0 when the mean is not positive"""
    mean = fmean(values)
    if mean <= 0:
        return 1.0
    return pvariance(values) / (mean * mean)


def analyze_transaction_group(
    transactions: List[Transaction], description: str
) -> Optional[RecurringPattern]:
    """
    Estimate amount, periodicity and confidence for one candidate series.

    Confidence = 1 - intervalVariance/meanInterval^2 - amountVariance/meanAmount^2,
    clamped to [0, 1]. A perfectly regular series (same amount, same gap)
    scores exactly 1.0; any extra spread lowers it.

    Returns None for groups with fewer than 3 occurrences.
    """
    if len(transactions) < MIN_PATTERN_OCCURRENCES:
        return None

    amounts = [float(t.amount_cents) for t in transactions]
    dates = sorted(t.date for t in transactions)
    intervals = [float((later - earlier).days) for earlier, later in zip(dates, dates[1:])]

    mean_amount = fmean(amounts)
    mean_interval = fmean(intervals)

    confidence = 1.0 - _dispersion(intervals) - _dispersion(amounts)
    confidence = min(max(confidence, 0.0), 1.0)

    return RecurringPattern(
        type=transactions[0].type,
        description=description,
        average_amount_cents=round(mean_amount),
        frequency=classify_frequency(mean_interval),
        confidence=confidence,
        next_occurrence=dates[-1] + timedelta(days=round(mean_interval)),
        occurrences=len(transactions),
    )


def group_transactions(transactions: List[Transaction]) -> Dict[Tuple[TransactionType, str], List[Transaction]]:
    """Bucket transactions by (type, normalized description)"""
    groups: Dict[Tuple[TransactionType, str], List[Transaction]] = defaultdict(list)
    for txn in transactions:
        groups[(txn.type, normalize_description(txn.description))].append(txn)
    return groups


def detect_recurring_patterns(
    transactions: List[Transaction],
    min_confidence: float = MIN_PATTERN_CONFIDENCE,
) -> List[RecurringPattern]:
    """
    Main entry point: find recurring income and expense series.

    Only patterns with confidence above min_confidence are returned,
    highest confidence first.
    """
    patterns = []
    for (_, description), members in group_transactions(transactions).items():
        pattern = analyze_transaction_group(members, description)
        if pattern is not None and pattern.confidence > min_confidence:
            patterns.append(pattern)

    patterns.sort(key=lambda p: (-p.confidence, p.type.value, p.description))
    logger.debug("Detected %d recurring patterns", len(patterns))
    return patterns
