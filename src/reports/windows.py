"""
Reporting Time Windows

Maps a TimeRange to the lower bound of the reporting window.

DESIGN DECISION: ALL has no lower bound (None) instead of a far-past
sentinel date. Every consumer treats None as "unbounded".

Month and year steps are calendar steps: relativedelta clamps the day
of month to the length of the target month (Mar 31 - 1 month = Feb 28/29).
"""

from datetime import datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from src.models.transaction import TimeRange, ensure_utc, utc_now


def start_of_window(
    time_range: TimeRange,
    now: Optional[datetime] = None,
) -> Optional[datetime]:
    """
    Lower bound of the window ending at `now`.

    Returns None for TimeRange.ALL.
    """
    now = ensure_utc(now) if now is not None else utc_now()

    if time_range == TimeRange.WEEK:
        return now - timedelta(days=7)
    if time_range == TimeRange.MONTH:
        return now - relativedelta(months=1)
    if time_range == TimeRange.YEAR:
        return now - relativedelta(years=1)
    if time_range == TimeRange.ALL:
        return None

    raise ValueError(f"Unknown time range: {time_range}")


def window_bounds(
    time_range: TimeRange,
    now: Optional[datetime] = None,
) -> tuple[Optional[datetime], datetime]:
    """(start, end) for a window ending now."""
    end = ensure_utc(now) if now is not None else utc_now()
    return start_of_window(time_range, end), end
