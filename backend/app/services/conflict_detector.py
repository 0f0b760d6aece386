"""
Find overlaps between proposed and existing schedule items.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from app.models.schedule import Conflict, ScheduleItem
from app.services.range_algebra import intersect


def detect_conflicts(
    proposed: Iterable[ScheduleItem],
    existing: Iterable[ScheduleItem],
    dedupe: bool = False,
    weekday: Optional[int] = None,
) -> list[Conflict]:
    """
    Report every (proposed, existing) pair whose intervals overlap.

    Args:
        proposed: Items the caller wants to add
        existing: Items currently stored for the same scope
        dedupe: Collapse conflicts with an identical overlap range
        weekday: Tag conflicts with the weekday they belong to

    Returns:
        Conflicts in proposal order; empty when the proposal fits as-is
    """
    existing = list(existing)
    conflicts: list[Conflict] = []
    seen: set[tuple[int, int]] = set()
    for p in proposed:
        for e in existing:
            overlap = intersect(p.interval, e.interval)
            if overlap is None:
                continue
            key = (overlap.start, overlap.end)
            if dedupe:
                if key in seen:
                    continue
                seen.add(key)
            conflicts.append(
                Conflict(
                    overlap=overlap,
                    proposed_label=p.label,
                    existing_label=e.label,
                    existing_id=e.id,
                    weekday=weekday,
                )
            )
    return conflicts


def detect_weekday_conflicts(
    proposed_by_weekday: Mapping[int, list[ScheduleItem]],
    existing_by_weekday: Mapping[int, list[ScheduleItem]],
) -> list[Conflict]:
    """Conflicts of a multi-weekday standing push, deduplicated per weekday."""
    conflicts: list[Conflict] = []
    for weekday in sorted(proposed_by_weekday):
        conflicts.extend(
            detect_conflicts(
                proposed_by_weekday[weekday],
                existing_by_weekday.get(weekday, []),
                dedupe=True,
                weekday=weekday,
            )
        )
    return conflicts


def find_internal_overlaps(
    items: Iterable[ScheduleItem],
) -> list[tuple[ScheduleItem, ScheduleItem]]:
    """Pairs of items within one proposal that overlap each other."""
    ordered = sorted(items, key=lambda item: (item.interval.start, item.interval.end))
    pairs: list[tuple[ScheduleItem, ScheduleItem]] = []
    for i, first in enumerate(ordered):
        for second in ordered[i + 1:]:
            if second.interval.start >= first.interval.end:
                break
            pairs.append((first, second))
    return pairs
