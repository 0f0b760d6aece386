"""
Models for the standing weekly routine and block proposals.
"""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.enums import DepthLevel, ItemOrigin, ResolutionStrategy
from app.models.schedule import Conflict, Interval, ResolutionResult, ScheduleItem, Window

Weekday = Annotated[int, Field(ge=0, le=6)]


class BlockProposal(BaseModel):
    """A block the user composes, with optional breaks inside it."""

    interval: Interval
    breaks: list[Interval] = Field(default_factory=list)
    label: Optional[str] = Field(None, max_length=200)
    depth_level: Optional[DepthLevel] = None
    goal_id: Optional[str] = None

    @field_validator("label")
    @classmethod
    def _strip_label(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    def to_item(self, origin: ItemOrigin, default_depth: DepthLevel) -> ScheduleItem:
        return ScheduleItem(
            interval=self.interval,
            depth_level=self.depth_level or default_depth,
            label=self.label,
            goal_id=self.goal_id,
            origin=origin,
        )


class StandingBlockProposal(BlockProposal):
    """Block pushed to one or more weekdays of the standing routine."""

    days: list[Weekday] = Field(..., min_length=1)


class RoutineView(BaseModel):
    weekday: Weekday
    items: list[ScheduleItem] = Field(default_factory=list)
    window: Optional[Window] = None


class WindowUpdate(BaseModel):
    days: list[Weekday] = Field(..., min_length=1)
    window: Window


class StandingPushRequest(BaseModel):
    blocks: list[StandingBlockProposal] = Field(..., min_length=1)
    strategy: Optional[ResolutionStrategy] = None
    confirm_replace: bool = False


class WeekdayResolution(BaseModel):
    weekday: Weekday
    resolution: ResolutionResult


class StandingPushResponse(BaseModel):
    results: list[WeekdayResolution] = Field(default_factory=list)

    @property
    def inserted_count(self) -> int:
        return sum(len(r.resolution.inserted) for r in self.results)


class ConflictPreview(BaseModel):
    conflicts: list[Conflict] = Field(default_factory=list)
