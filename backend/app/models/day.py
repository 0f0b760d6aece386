"""
Models for a concrete calendar day and its blocks.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.enums import BlockStatus, DepthLevel, ItemOrigin, ResolutionStrategy
from app.models.routine import BlockProposal
from app.models.schedule import Interval, ResolutionResult, ScheduleItem


class DayRecord(BaseModel):
    """Lock-relevant timestamps of a day."""

    opened_at: Optional[datetime] = None
    shutdown_at: Optional[datetime] = None


class DayBlock(BaseModel):
    id: str
    interval: Interval
    depth_level: DepthLevel = DepthLevel.DEEP
    goal_id: Optional[str] = None
    label: Optional[str] = None
    status: BlockStatus = BlockStatus.PLANNED
    actual_sec: int = Field(0, ge=0)
    origin: ItemOrigin = ItemOrigin.STANDING

    def as_schedule_item(self) -> ScheduleItem:
        return ScheduleItem(
            id=self.id,
            interval=self.interval,
            depth_level=self.depth_level,
            goal_id=self.goal_id,
            label=self.label,
            origin=self.origin,
        )


class DayPack(BaseModel):
    """A day with its blocks, sorted by start."""

    user_id: str
    date: date
    opened_at: Optional[datetime] = None
    shutdown_at: Optional[datetime] = None
    journal: Optional[str] = None
    blocks: list[DayBlock] = Field(default_factory=list)

    @property
    def record(self) -> DayRecord:
        return DayRecord(opened_at=self.opened_at, shutdown_at=self.shutdown_at)


class DayBlockUpdate(BaseModel):
    """
    Patch for a day block.

    Sending goal_id=null explicitly clears the goal; omitting it keeps it.
    """

    goal_id: Optional[str] = None
    depth_level: Optional[DepthLevel] = None
    status: Optional[BlockStatus] = None
    actual_sec: Optional[int] = Field(None, ge=0)


class SummaryBucket(BaseModel):
    planned_min: int = 0
    actual_sec: int = 0


class DaySummary(BaseModel):
    date: date
    planned_min: int = 0
    by_goal: dict[str, SummaryBucket] = Field(default_factory=dict)
    by_depth: dict[int, SummaryBucket] = Field(default_factory=dict)


class DayPlanRequest(BaseModel):
    """Single-day plan: one-off blocks for one date."""

    blocks: list[BlockProposal] = Field(..., min_length=1)
    strategy: Optional[ResolutionStrategy] = None
    confirm_replace: bool = False


class DayPlanResponse(BaseModel):
    pack: DayPack
    resolution: ResolutionResult


class ShutdownRequest(BaseModel):
    journal: Optional[str] = Field(None, max_length=10000)
