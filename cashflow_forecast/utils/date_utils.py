"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import List, Tuple


def forecast_dates(as_of: date, horizon_days: int) -> List[date]:
    """Dates of the forecast window: the day after as_of through as_of + horizon"""
    return [as_of + timedelta(days=offset) for offset in range(1, horizon_days + 1)]


def month_key(day: date) -> Tuple[int, int]:
    """Calendar (year, month) bucket"""
    return day.year, day.month


def month_index(day: date) -> int:
    """Zero-based month of year (0 = January)"""
    return day.month - 1


def span_days(dates: List[date]) -> int:
    """Days covered by a set of dates, inclusive of both ends"""
    if not dates:
        return 0
    return (max(dates) - min(dates)).days + 1


def advance_to(anchor: date, not_before: date, period_days: int) -> date:
    """Move anchor forward by whole periods until it falls on/after not_before"""
    if anchor >= not_before:
        return anchor
    behind = (not_before - anchor).days
    periods = -(-behind // period_days)
    return anchor + timedelta(days=periods * period_days)
