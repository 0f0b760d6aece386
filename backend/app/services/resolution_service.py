"""
Conflict resolution for schedule proposals.

A proposal is either Clean (no overlap with the existing items of its scope)
and inserted as-is, or Conflicted, in which case the caller must pick a
strategy explicitly:

- replace: drop every existing item of the scope, insert the proposal
  (destructive; needs confirm_replace=True)
- merge-overwrite: drop only the existing items the proposal overlaps
- only-new-in-gaps: keep existing items, trim the proposal to the gaps

Conflicts are always computed against the pre-mutation existing set.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from app.core.exceptions import BusinessLogicError, ConflictError, ValidationError
from app.core.logger import setup_logger
from app.models.enums import ResolutionOutcome, ResolutionStrategy, WindowMode
from app.models.schedule import ResolutionResult, ScheduleItem, Window
from app.services.conflict_detector import (
    detect_conflicts,
    detect_weekday_conflicts,
    find_internal_overlaps,
)
from app.services.range_algebra import merge, overlaps, subtract
from app.services.window_enforcement import enforce_window_items

logger = setup_logger(__name__)


def _sort_items(items: Iterable[ScheduleItem]) -> list[ScheduleItem]:
    return sorted(items, key=lambda item: (item.interval.start, item.interval.end))


def _prepare_proposal(
    proposed: Iterable[ScheduleItem],
    window: Optional[Window],
    window_mode: WindowMode,
) -> list[ScheduleItem]:
    proposed = list(proposed)
    pairs = find_internal_overlaps(proposed)
    if pairs:
        raise ValidationError(
            "Proposed items overlap each other",
            details={
                "overlaps": [
                    [first.interval.model_dump(), second.interval.model_dump()]
                    for first, second in pairs
                ]
            },
        )
    proposed = enforce_window_items(proposed, window, window_mode)
    # Final safety pass; a no-op after REJECT succeeded.
    return enforce_window_items(proposed, window, WindowMode.CLIP)


def resolve(
    proposed: Iterable[ScheduleItem],
    existing: Iterable[ScheduleItem],
    strategy: Optional[ResolutionStrategy] = None,
    *,
    window: Optional[Window] = None,
    window_mode: WindowMode = WindowMode.CLIP,
    confirm_replace: bool = False,
    weekday: Optional[int] = None,
    dedupe: bool = False,
) -> ResolutionResult:
    """
    Compute the final item set of one scope (a weekday or a date).

    Args:
        proposed: New items, must not overlap each other
        existing: Items currently stored for the scope
        strategy: How to handle conflicts; None refuses conflicting proposals
        window: The scope's window; None means the full day
        window_mode: REJECT for interactive entry, CLIP to trim silently
        confirm_replace: Required to use the destructive replace strategy
        weekday: Tag conflicts with this weekday
        dedupe: Report identical overlap ranges once

    Returns:
        ResolutionResult with the full final set and the delta to persist

    Raises:
        ValidationError: Proposal overlaps itself
        OutsideWindowError: REJECT mode and an item leaves the window
        ConflictError: Conflicts found and no strategy given
        BusinessLogicError: replace requested without confirmation
    """
    proposed = _prepare_proposal(proposed, window, window_mode)
    existing = list(existing)
    conflicts = detect_conflicts(proposed, existing, dedupe=dedupe, weekday=weekday)
    outcome = ResolutionOutcome.CONFLICTED if conflicts else ResolutionOutcome.CLEAN

    if strategy == ResolutionStrategy.REPLACE:
        if not confirm_replace:
            raise BusinessLogicError(
                "replace deletes every existing item and must be confirmed",
                details={"strategy": strategy.value},
            )
        logger.debug("replace: removing %d, inserting %d", len(existing), len(proposed))
        return ResolutionResult(
            outcome=outcome,
            strategy=strategy,
            items=_sort_items(proposed),
            kept=[],
            removed=_sort_items(existing),
            inserted=_sort_items(proposed),
            conflicts=conflicts,
        )

    if not conflicts:
        return ResolutionResult(
            outcome=outcome,
            strategy=strategy,
            items=_sort_items(existing + proposed),
            kept=_sort_items(existing),
            inserted=_sort_items(proposed),
        )

    if strategy is None:
        raise ConflictError(conflicts)

    if strategy == ResolutionStrategy.MERGE_OVERWRITE:
        kept: list[ScheduleItem] = []
        removed: list[ScheduleItem] = []
        for item in existing:
            if any(overlaps(item.interval, p.interval) for p in proposed):
                removed.append(item)
            else:
                kept.append(item)
        logger.debug("merge-overwrite: removing %d existing items", len(removed))
        return ResolutionResult(
            outcome=outcome,
            strategy=strategy,
            items=_sort_items(kept + proposed),
            kept=_sort_items(kept),
            removed=_sort_items(removed),
            inserted=_sort_items(proposed),
            conflicts=conflicts,
        )

    # only-new-in-gaps
    blocked = merge(conflict.overlap for conflict in conflicts)
    inserted: list[ScheduleItem] = []
    dropped: list[ScheduleItem] = []
    for item in proposed:
        fragments = subtract(item.interval, blocked)
        if not fragments:
            dropped.append(item)
            continue
        inserted.extend(item.with_interval(fragment) for fragment in fragments)
    logger.debug(
        "only-new-in-gaps: %d fragments inserted, %d items dropped",
        len(inserted),
        len(dropped),
    )
    return ResolutionResult(
        outcome=outcome,
        strategy=strategy,
        items=_sort_items(existing + inserted),
        kept=_sort_items(existing),
        inserted=_sort_items(inserted),
        dropped=dropped,
        conflicts=conflicts,
    )


def resolve_weekdays(
    proposed_by_weekday: Mapping[int, list[ScheduleItem]],
    existing_by_weekday: Mapping[int, list[ScheduleItem]],
    windows_by_weekday: Mapping[int, Optional[Window]],
    strategy: Optional[ResolutionStrategy] = None,
    confirm_replace: bool = False,
) -> dict[int, ResolutionResult]:
    """
    Resolve a standing push spanning several weekdays, all or nothing.

    Every weekday is validated against its window (REJECT mode) and checked
    for conflicts before any result is produced, so a refusal on one weekday
    refuses the whole push.

    Raises:
        ConflictError: Any weekday conflicts and no strategy given; carries
            the conflicts of every weekday
    """
    prepared: dict[int, list[ScheduleItem]] = {}
    for weekday in sorted(proposed_by_weekday):
        prepared[weekday] = _prepare_proposal(
            proposed_by_weekday[weekday],
            windows_by_weekday.get(weekday),
            WindowMode.REJECT,
        )

    conflicts = detect_weekday_conflicts(prepared, existing_by_weekday)
    if conflicts and strategy is None:
        raise ConflictError(conflicts)

    return {
        weekday: resolve(
            items,
            existing_by_weekday.get(weekday, []),
            strategy,
            window=windows_by_weekday.get(weekday),
            window_mode=WindowMode.REJECT,
            confirm_replace=confirm_replace,
            weekday=weekday,
            dedupe=True,
        )
        for weekday, items in prepared.items()
    }
