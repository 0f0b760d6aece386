"""
Date, weekday and minute-of-day utilities.

Schedule times are naive minute offsets within one local day (0..1440).
Timestamps (day opened/shut down) are stored as timezone-aware UTC.
"""

from datetime import date, datetime, timezone
from typing import Optional

# UTC timezone constant
UTC = timezone.utc

MINUTES_PER_DAY = 24 * 60

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Replaces datetime.utcnow() which is deprecated in Python 3.12+.
    """
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware and in UTC.

    Args:
        dt: datetime to convert (can be None, naive, or timezone-aware)

    Returns:
        Optional[datetime]: UTC timezone-aware datetime, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def weekday_of(day: date) -> int:
    """
    Calendar weekday with Sunday first.

    Example:
        >>> weekday_of(date(2026, 10, 18))  # a Sunday
        0
    """
    return (day.weekday() + 1) % 7


def weekday_name(weekday: int) -> str:
    return WEEKDAY_NAMES[weekday]


def to_minutes(value: str) -> int:
    """
    Parse "HH:MM" into minutes since midnight.

    "24:00" is accepted as the end-of-day bound (1440).

    Raises:
        ValueError: If the string is not a valid time of day
    """
    parts = value.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid time: {value!r}")
    hours = int(parts[0])
    minutes = int(parts[1])
    if hours == 24 and minutes == 0:
        return MINUTES_PER_DAY
    if hours < 0 or hours > 23 or minutes < 0 or minutes > 59:
        raise ValueError(f"Invalid time: {value!r}")
    return hours * 60 + minutes


def from_minutes(value: int) -> str:
    """Format minutes since midnight as "HH:MM"."""
    return f"{value // 60:02d}:{value % 60:02d}"


def minute_of_day(dt: datetime) -> int:
    """Minutes since midnight of a wall-clock datetime."""
    return dt.hour * 60 + dt.minute
