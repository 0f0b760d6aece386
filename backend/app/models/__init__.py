"""Pydantic models (schemas) for the application."""

from app.models.enums import (
    BlockStatus,
    DepthLevel,
    ItemOrigin,
    ResolutionOutcome,
    ResolutionStrategy,
    WindowMode,
)
from app.models.schedule import (
    Conflict,
    Interval,
    ResolutionResult,
    ScheduleItem,
    SprintComposition,
    Window,
)
from app.models.routine import (
    BlockProposal,
    ConflictPreview,
    RoutineView,
    StandingBlockProposal,
    StandingPushRequest,
    StandingPushResponse,
    WindowUpdate,
)
from app.models.day import DayBlock, DayBlockUpdate, DayPack, DayRecord, DaySummary

__all__ = [
    # Enums
    "BlockStatus",
    "DepthLevel",
    "ItemOrigin",
    "ResolutionOutcome",
    "ResolutionStrategy",
    "WindowMode",
    # Schedule
    "Conflict",
    "Interval",
    "ResolutionResult",
    "ScheduleItem",
    "SprintComposition",
    "Window",
    # Routine
    "BlockProposal",
    "ConflictPreview",
    "RoutineView",
    "StandingBlockProposal",
    "StandingPushRequest",
    "StandingPushResponse",
    "WindowUpdate",
    # Day
    "DayBlock",
    "DayBlockUpdate",
    "DayPack",
    "DayRecord",
    "DaySummary",
]
