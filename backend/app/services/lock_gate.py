"""
Weekday lock: the standing routine and window of today's weekday are frozen
while today's day is open and not yet shut down.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from app.core.exceptions import WeekdayLockedError
from app.models.day import DayRecord
from app.utils.datetime_utils import weekday_of


def is_locked(weekday: int, today: date, day_record: Optional[DayRecord]) -> bool:
    if weekday != weekday_of(today):
        return False
    if day_record is None:
        return False
    return day_record.opened_at is not None and day_record.shutdown_at is None


def ensure_unlocked(weekday: int, today: date, day_record: Optional[DayRecord]) -> None:
    """
    Raises:
        WeekdayLockedError: If the weekday's routine may not be changed now
    """
    if is_locked(weekday, today, day_record):
        raise WeekdayLockedError(weekday, "day is open")
