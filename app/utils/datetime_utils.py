"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

import calendar
from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """
    Make a datetime timezone-aware.

    Naive values (as returned by some database drivers) are treated as UTC.

    Args:
        value: Datetime, naive or aware

    Returns:
        Aware datetime in UTC
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def add_months(value: datetime, months: int) -> datetime:
    """
    Add calendar months to a datetime.

    The day is clamped to the last day of the target month
    (Jan 31 + 1 month = Feb 28/29).

    Args:
        value: Starting datetime
        months: Number of months to add (may be 0)

    Returns:
        Shifted datetime with the same time of day and tzinfo
    """
    if months == 0:
        return value

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def month_bounds(value: datetime) -> tuple[datetime, datetime]:
    """
    Get the [start, end) bounds of the calendar month containing value.

    Args:
        value: Any aware datetime within the month

    Returns:
        Tuple of (first instant of month, first instant of next month)
    """
    start = value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return start, add_months(start, 1)
