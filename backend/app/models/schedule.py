"""
Scheduling value types: intervals, windows, items and conflicts.

All times are minute offsets within one local day. Every type here is
immutable; engine functions return new instances instead of mutating.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.enums import (
    DepthLevel,
    ItemOrigin,
    ResolutionOutcome,
    ResolutionStrategy,
)
from app.utils.datetime_utils import MINUTES_PER_DAY, from_minutes


class Interval(BaseModel):
    """Half-open minute range [start, end)."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0, le=MINUTES_PER_DAY)
    end: int = Field(..., ge=0, le=MINUTES_PER_DAY)

    @model_validator(mode="after")
    def _check_order(self) -> "Interval":
        if self.start >= self.end:
            raise ValueError(f"start ({self.start}) must be before end ({self.end})")
        return self

    @property
    def minutes(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"{from_minutes(self.start)}-{from_minutes(self.end)}"


class Window(BaseModel):
    """Operating window of a weekday. No window means the full day."""

    model_config = ConfigDict(frozen=True)

    open_min: int = Field(..., ge=0, le=MINUTES_PER_DAY)
    close_min: int = Field(..., ge=0, le=MINUTES_PER_DAY)

    @model_validator(mode="after")
    def _check_order(self) -> "Window":
        if self.close_min <= self.open_min:
            raise ValueError("close_min must be after open_min")
        return self

    @property
    def interval(self) -> Interval:
        return Interval(start=self.open_min, end=self.close_min)


class ScheduleItem(BaseModel):
    """
    Atomic scheduled unit, either a standing routine row or a day block.

    `id` is set when the item was loaded from storage and is None for
    proposals that have not been persisted yet.
    """

    model_config = ConfigDict(frozen=True)

    interval: Interval
    depth_level: DepthLevel = DepthLevel.DEEP
    label: Optional[str] = None
    goal_id: Optional[str] = None
    origin: ItemOrigin = ItemOrigin.STANDING
    id: Optional[str] = None

    def with_interval(self, interval: Interval) -> "ScheduleItem":
        return self.model_copy(update={"interval": interval})


class Conflict(BaseModel):
    """Overlap between one proposed and one existing item."""

    model_config = ConfigDict(frozen=True)

    overlap: Interval
    proposed_label: Optional[str] = None
    existing_label: Optional[str] = None
    existing_id: Optional[str] = None
    weekday: Optional[int] = Field(None, ge=0, le=6)


class SprintComposition(BaseModel):
    """Sprints left after removing breaks from a block."""

    model_config = ConfigDict(frozen=True)

    sprints: list[Interval]
    normalized_breaks: list[Interval] = Field(default_factory=list)


class ResolutionResult(BaseModel):
    """
    Final item set for one scope (weekday or date) after resolution.

    `items` is the complete post-mutation set sorted by start; `removed` and
    `inserted` are the delta a repository applies to reach it.
    """

    model_config = ConfigDict(frozen=True)

    outcome: ResolutionOutcome
    strategy: Optional[ResolutionStrategy] = None
    items: list[ScheduleItem] = Field(default_factory=list)
    kept: list[ScheduleItem] = Field(default_factory=list)
    removed: list[ScheduleItem] = Field(default_factory=list)
    inserted: list[ScheduleItem] = Field(default_factory=list)
    dropped: list[ScheduleItem] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
