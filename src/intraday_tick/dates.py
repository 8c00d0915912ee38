"""
Default trading window selection.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Tuple

from intraday_tick.exceptions import NoTradingDayFoundError

logger = logging.getLogger(__name__)

WINDOW_START = time(15, 30, 0)
WINDOW_END = time(15, 35, 0)
DEFAULT_LOOKBACK_DAYS = 14


def is_weekend(day: date) -> bool:
    """
    Check if a date falls on a weekend (Saturday or Sunday).

    Args:
        day: date or datetime to check

    Returns:
        True if the date is Saturday or Sunday, False otherwise
    """
    return day.weekday() >= 5  # 5=Saturday, 6=Sunday


def compute_default_range(
    now: datetime,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    window_start: time = WINDOW_START,
    window_end: time = WINDOW_END,
) -> Tuple[datetime, datetime]:
    """
    Compute the default request window on the most recent weekday.

    The candidate days start at ``now``'s own date and walk backwards one
    calendar day at a time. Values are returned as naive datetimes in the
    same clock as ``now``; callers pass a GMT clock.

    Args:
        now: Reference time (GMT)
        lookback_days: Number of candidate days inspected before giving up
        window_start: Time of day the window opens
        window_end: Time of day the window closes

    Returns:
        Tuple of (start, end) datetimes on the selected day

    Raises:
        NoTradingDayFoundError: If every candidate day is a weekend
    """
    candidate = now.date()
    for _ in range(lookback_days):
        if not is_weekend(candidate):
            start = datetime.combine(candidate, window_start)
            end = datetime.combine(candidate, window_end)
            logger.debug(f"Default range resolved to {start.isoformat()} - {end.isoformat()}")
            return start, end
        candidate -= timedelta(days=1)

    raise NoTradingDayFoundError(f"No weekday found within {lookback_days} days before {now.date().isoformat()}")
