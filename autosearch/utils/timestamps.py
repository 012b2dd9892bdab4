"""Timestamp utilities for UTC handling and datetime parsing.

This module provides utilities for working with timestamps in UTC:
- Getting current UTC time
- Converting timezone-naive to timezone-aware UTC
- Formatting timestamps for result output
- Computing posting age in fractional days
"""

from datetime import datetime, timezone
from typing import Optional

SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Current UTC time with timezone info

    Example:
        >>> now = utc_now()
        >>> now.tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    If the datetime is timezone-naive, it's treated as UTC.
    If the datetime has a different timezone, it's converted to UTC.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime, include_microseconds: bool = False) -> str:
    """Format a datetime as ISO 8601 string in UTC.

    Args:
        dt: Datetime to format
        include_microseconds: Whether to include microseconds in output

    Returns:
        ISO 8601 formatted string with 'Z' suffix

    Example:
        >>> from datetime import datetime, timezone
        >>> dt = datetime(2025, 11, 4, 12, 0, 0, tzinfo=timezone.utc)
        >>> format_timestamp(dt)
        '2025-11-04T12:00:00Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""

    if include_microseconds:
        return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")


def age_in_days(posted_at: datetime, now: Optional[datetime] = None) -> float:
    """Age of a timestamp relative to ``now`` in fractional days.

    Negative ages (timestamps in the future) are returned as-is; callers
    decide how to treat them.

    Args:
        posted_at: Timestamp to measure
        now: Reference time (defaults to the current UTC time)

    Returns:
        Elapsed days as a float

    Example:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2025, 11, 1, tzinfo=timezone.utc)
        >>> age_in_days(start, datetime(2025, 11, 3, 12, tzinfo=timezone.utc))
        2.5
    """
    reference = ensure_utc(now) if now is not None else utc_now()
    delta = reference - ensure_utc(posted_at)
    return delta.total_seconds() / SECONDS_PER_DAY
