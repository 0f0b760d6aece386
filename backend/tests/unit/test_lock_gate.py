"""
Unit tests for the weekday lock gate.
"""

from datetime import date, datetime, timezone

import pytest

from app.core.exceptions import WeekdayLockedError
from app.models.day import DayRecord
from app.services.lock_gate import ensure_unlocked, is_locked

WEDNESDAY = date(2026, 10, 14)
OPENED = datetime(2026, 10, 14, 7, 0, tzinfo=timezone.utc)
CLOSED = datetime(2026, 10, 14, 19, 0, tzinfo=timezone.utc)


def test_open_day_locks_todays_weekday():
    record = DayRecord(opened_at=OPENED)
    assert is_locked(3, WEDNESDAY, record)
    with pytest.raises(WeekdayLockedError) as exc_info:
        ensure_unlocked(3, WEDNESDAY, record)
    assert exc_info.value.weekday == 3
    assert exc_info.value.reason == "day is open"


def test_other_weekday_not_locked():
    assert not is_locked(4, WEDNESDAY, DayRecord(opened_at=OPENED))


def test_no_day_record_not_locked():
    assert not is_locked(3, WEDNESDAY, None)


def test_unopened_day_not_locked():
    assert not is_locked(3, WEDNESDAY, DayRecord())


def test_shut_down_day_not_locked():
    record = DayRecord(opened_at=OPENED, shutdown_at=CLOSED)
    assert not is_locked(3, WEDNESDAY, record)
    ensure_unlocked(3, WEDNESDAY, record)
