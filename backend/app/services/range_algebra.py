"""
Set operations over half-open minute intervals.

All functions are pure and total for well-formed intervals; results are
new, sorted lists and inputs are never modified.
"""

from __future__ import annotations

from typing import Iterable, Optional

from app.models.schedule import Interval


def _sorted(intervals: Iterable[Interval]) -> list[Interval]:
    return sorted(intervals, key=lambda interval: (interval.start, interval.end))


def overlaps(a: Interval, b: Interval) -> bool:
    """True if the two ranges share at least one minute."""
    return max(a.start, b.start) < min(a.end, b.end)


def merge(intervals: Iterable[Interval]) -> list[Interval]:
    """
    Fold overlapping or touching intervals into a minimal disjoint cover.

    Example:
        [09:00-10:00, 10:00-10:30, 11:00-12:00] -> [09:00-10:30, 11:00-12:00]
    """
    merged: list[Interval] = []
    for interval in _sorted(intervals):
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            if interval.end > last.end:
                merged[-1] = Interval(start=last.start, end=interval.end)
            continue
        merged.append(interval)
    return merged


def intersect(a: Interval, b: Interval) -> Optional[Interval]:
    start = max(a.start, b.start)
    end = min(a.end, b.end)
    if start >= end:
        return None
    return Interval(start=start, end=end)


def subtract(base: Interval, blockers: Iterable[Interval]) -> list[Interval]:
    """Parts of `base` not covered by any blocker, sorted and disjoint."""
    gaps: list[Interval] = []
    cursor = base.start
    for blocker in merge(blockers):
        if blocker.end <= cursor:
            continue
        if blocker.start >= base.end:
            break
        if blocker.start > cursor:
            gaps.append(Interval(start=cursor, end=blocker.start))
        cursor = max(cursor, blocker.end)
        if cursor >= base.end:
            break
    if cursor < base.end:
        gaps.append(Interval(start=cursor, end=base.end))
    return gaps


def within(interval: Interval, container: Interval) -> bool:
    return container.start <= interval.start and interval.end <= container.end


def total_minutes(intervals: Iterable[Interval]) -> int:
    """Minutes covered by the union of the intervals."""
    return sum(interval.minutes for interval in merge(intervals))
