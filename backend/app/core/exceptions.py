"""
Custom exceptions for the application.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from app.models.schedule import Conflict, Interval, Window


class DeepCalendarError(Exception):
    """Base exception for deep calendar."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(DeepCalendarError):
    """Resource not found."""

    pass


class DuplicateError(DeepCalendarError):
    """Duplicate resource detected."""

    pass


class ValidationError(DeepCalendarError):
    """Malformed input rejected before it reaches the scheduling engine."""

    pass


class BusinessLogicError(DeepCalendarError):
    """Business logic constraint violation."""

    pass


class FullyCoveredError(BusinessLogicError):
    """Breaks consume the whole block, leaving no sprint."""

    def __init__(self, block: "Interval", breaks: list["Interval"]):
        super().__init__(
            "Breaks cover the whole block",
            details={
                "block": block.model_dump(),
                "breaks": [b.model_dump() for b in breaks],
            },
        )
        self.block = block
        self.breaks = breaks


class OutsideWindowError(BusinessLogicError):
    """One or more intervals fall outside the day window."""

    def __init__(self, intervals: list["Interval"], window: "Window"):
        super().__init__(
            "Outside day window",
            details={
                "intervals": [i.model_dump() for i in intervals],
                "window": window.model_dump(),
            },
        )
        self.intervals = intervals
        self.window = window


class ConflictError(BusinessLogicError):
    """Proposal overlaps existing items; the caller must pick a strategy."""

    def __init__(self, conflicts: list["Conflict"]):
        super().__init__(
            "conflicts",
            details={"conflicts": [c.model_dump(mode="json") for c in conflicts]},
        )
        self.conflicts = conflicts


class WeekdayLockedError(BusinessLogicError):
    """Standing routine or window mutation while that weekday's day is running."""

    def __init__(self, weekday: int, reason: str = "day is open"):
        super().__init__(
            f"Weekday {weekday} is locked: {reason}",
            details={"weekday": weekday, "reason": reason},
        )
        self.weekday = weekday
        self.reason = reason


class DayGateError(BusinessLogicError):
    """Day opened or shut down outside the grace period around its window."""

    def __init__(self, action: str, allowed: "Interval", now_min: int):
        super().__init__(
            f"Cannot {action} the day now",
            details={
                "action": action,
                "allowed": allowed.model_dump(),
                "now_min": now_min,
            },
        )
        self.action = action
        self.allowed = allowed
        self.now_min = now_min
