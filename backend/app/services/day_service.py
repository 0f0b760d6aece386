"""
Day lifecycle: open a day from the standing routine, run its blocks, shut it down.

Functions take a DayPack and return a new one; the input is never modified.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable, Optional
from uuid import uuid4

from app.core.exceptions import DayGateError, NotFoundError
from app.models.day import DayBlock, DayBlockUpdate, DayPack, DaySummary, SummaryBucket
from app.models.enums import BlockStatus, DepthLevel, ItemOrigin
from app.models.schedule import Interval, ScheduleItem, Window
from app.services.range_algebra import total_minutes
from app.utils.datetime_utils import MINUTES_PER_DAY, now_utc

# Grace periods (minutes) around the window for opening and shutting down
OPEN_GRACE_BEFORE = 10
OPEN_GRACE_AFTER = 10
CLOSE_GRACE_BEFORE = 15
CLOSE_GRACE_AFTER = 5


def _new_id() -> str:
    return str(uuid4())


def _copy(pack: DayPack) -> DayPack:
    return pack.model_copy(deep=True)


def _find(pack: DayPack, block_id: str) -> DayBlock:
    for block in pack.blocks:
        if block.id == block_id:
            return block
    raise NotFoundError(f"Block {block_id} not found", details={"date": pack.date.isoformat()})


def _grace(anchor: int, before: int, after: int) -> Interval:
    return Interval(start=max(0, anchor - before), end=min(MINUTES_PER_DAY, anchor + after))


def open_range(window: Window) -> Interval:
    """Minutes (inclusive) in which the day may be opened."""
    return _grace(window.open_min, OPEN_GRACE_BEFORE, OPEN_GRACE_AFTER)


def shutdown_range(window: Window) -> Interval:
    """Minutes (inclusive) in which the day may be shut down."""
    return _grace(window.close_min, CLOSE_GRACE_BEFORE, CLOSE_GRACE_AFTER)


def can_open(window: Optional[Window], now_min: int) -> bool:
    if window is None:
        return True
    allowed = open_range(window)
    return allowed.start <= now_min <= allowed.end


def can_shutdown(window: Optional[Window], now_min: int) -> bool:
    if window is None:
        return True
    allowed = shutdown_range(window)
    return allowed.start <= now_min <= allowed.end


def ensure_can_open(window: Optional[Window], now_min: int) -> None:
    """
    Raises:
        DayGateError: now_min is not within 10 minutes of the window opening
    """
    if not can_open(window, now_min):
        raise DayGateError("open", open_range(window), now_min)


def ensure_can_shutdown(window: Optional[Window], now_min: int) -> None:
    """
    Raises:
        DayGateError: now_min is not between 15 minutes before and 5 after the close
    """
    if not can_shutdown(window, now_min):
        raise DayGateError("shut down", shutdown_range(window), now_min)


def instantiate_day(
    user_id: str,
    day: date,
    standing_items: Iterable[ScheduleItem],
    opened_at: Optional[datetime] = None,
    id_factory: Callable[[], str] = _new_id,
) -> DayPack:
    """
    Open a day by copying its weekday's standing items as planned blocks.
    """
    ordered = sorted(standing_items, key=lambda item: item.interval.start)
    blocks = [
        DayBlock(
            id=id_factory(),
            interval=item.interval,
            depth_level=item.depth_level,
            goal_id=item.goal_id,
            label=item.label,
            status=BlockStatus.PLANNED,
            actual_sec=0,
            origin=ItemOrigin.STANDING,
        )
        for item in ordered
    ]
    return DayPack(
        user_id=user_id,
        date=day,
        opened_at=opened_at or now_utc(),
        blocks=blocks,
    )


def stop_active(pack: DayPack) -> DayPack:
    """Mark the running block (if any) as done."""
    next_pack = _copy(pack)
    for block in next_pack.blocks:
        if block.status == BlockStatus.ACTIVE:
            block.status = BlockStatus.DONE
    return next_pack


def start_block(pack: DayPack, block_id: str) -> DayPack:
    """Make one block active; the previously active block becomes done."""
    _find(pack, block_id)
    next_pack = stop_active(pack)
    _find(next_pack, block_id).status = BlockStatus.ACTIVE
    return next_pack


def update_block(pack: DayPack, block_id: str, patch: DayBlockUpdate) -> DayPack:
    next_pack = _copy(pack)
    block = _find(next_pack, block_id)
    if "goal_id" in patch.model_fields_set:
        block.goal_id = patch.goal_id or None
    if patch.depth_level is not None:
        block.depth_level = patch.depth_level
    if patch.status is not None:
        block.status = patch.status
    if patch.actual_sec is not None:
        block.actual_sec = patch.actual_sec
    return next_pack


def shutdown(
    pack: DayPack,
    journal: Optional[str] = None,
    at: Optional[datetime] = None,
) -> DayPack:
    next_pack = stop_active(pack)
    next_pack.shutdown_at = at or now_utc()
    next_pack.journal = journal
    return next_pack


def summarize(pack: DayPack) -> DaySummary:
    """Planned minutes and tracked seconds, per goal and per depth level."""
    by_goal: dict[str, SummaryBucket] = {}
    by_depth = {int(level): SummaryBucket() for level in DepthLevel}
    for block in pack.blocks:
        planned = block.interval.minutes
        if block.goal_id:
            bucket = by_goal.setdefault(block.goal_id, SummaryBucket())
            bucket.planned_min += planned
            bucket.actual_sec += block.actual_sec
        depth = by_depth[int(block.depth_level)]
        depth.planned_min += planned
        depth.actual_sec += block.actual_sec
    return DaySummary(
        date=pack.date,
        planned_min=total_minutes(block.interval for block in pack.blocks),
        by_goal=by_goal,
        by_depth=by_depth,
    )
