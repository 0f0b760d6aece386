"""
Bound proposed intervals by a weekday's operating window.
"""

from __future__ import annotations

from typing import Iterable, Optional

from app.core.exceptions import OutsideWindowError
from app.models.enums import WindowMode
from app.models.schedule import Interval, ScheduleItem, Window
from app.services.range_algebra import intersect, within


def enforce_window(
    proposed: Iterable[Interval],
    window: Optional[Window],
    mode: WindowMode = WindowMode.REJECT,
) -> list[Interval]:
    """
    Check or clip intervals against a window.

    Args:
        proposed: Intervals to check
        window: The weekday's window; None means the full day
        mode: REJECT raises on any interval outside the window,
              CLIP trims intervals and drops those left empty

    Raises:
        OutsideWindowError: In REJECT mode, listing every offending interval
    """
    proposed = list(proposed)
    if window is None:
        return proposed

    bounds = window.interval
    if mode == WindowMode.REJECT:
        outside = [interval for interval in proposed if not within(interval, bounds)]
        if outside:
            raise OutsideWindowError(outside, window)
        return proposed

    clipped: list[Interval] = []
    for interval in proposed:
        part = intersect(interval, bounds)
        if part is not None:
            clipped.append(part)
    return clipped


def enforce_window_items(
    items: Iterable[ScheduleItem],
    window: Optional[Window],
    mode: WindowMode = WindowMode.REJECT,
) -> list[ScheduleItem]:
    """Same as `enforce_window`, keeping each item's label, depth and goal."""
    items = list(items)
    if window is None:
        return items

    if mode == WindowMode.REJECT:
        enforce_window([item.interval for item in items], window, mode)
        return items

    bounds = window.interval
    clipped: list[ScheduleItem] = []
    for item in items:
        part = intersect(item.interval, bounds)
        if part is not None:
            clipped.append(item.with_interval(part))
    return clipped
