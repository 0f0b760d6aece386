"""
Unit tests for conflict detection.
"""

from app.models.schedule import Interval, ScheduleItem
from app.services.conflict_detector import (
    detect_conflicts,
    detect_weekday_conflicts,
    find_internal_overlaps,
)


def item(start: int, end: int, label: str | None = None, item_id: str | None = None) -> ScheduleItem:
    return ScheduleItem(interval=Interval(start=start, end=end), label=label, id=item_id)


def test_no_conflicts_when_disjoint():
    assert detect_conflicts([item(540, 600)], [item(600, 660), item(480, 540)]) == []


def test_reports_overlap_and_labels():
    conflicts = detect_conflicts(
        [item(600, 720, "Write")],
        [item(540, 660, "Email", "e1")],
    )
    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.overlap == Interval(start=600, end=660)
    assert conflict.proposed_label == "Write"
    assert conflict.existing_label == "Email"
    assert conflict.existing_id == "e1"
    assert conflict.weekday is None


def test_every_pair_is_reported():
    conflicts = detect_conflicts(
        [item(540, 720), item(780, 900)],
        [item(600, 610), item(700, 800)],
    )
    overlaps = [(c.overlap.start, c.overlap.end) for c in conflicts]
    assert overlaps == [(600, 610), (700, 720), (780, 800)]


def test_dedupe_collapses_identical_overlap():
    proposed = [item(600, 660, "A")]
    existing = [item(600, 660, "X", "x1"), item(600, 660, "Y", "y1")]

    assert len(detect_conflicts(proposed, existing)) == 2
    assert len(detect_conflicts(proposed, existing, dedupe=True)) == 1


def test_weekday_conflicts_are_tagged_and_sorted():
    block = [item(540, 600, "Deep")]
    conflicts = detect_weekday_conflicts(
        {3: block, 1: block, 5: block},
        {1: [item(570, 630)], 3: [item(500, 560)]},
    )
    assert [c.weekday for c in conflicts] == [1, 3]
    assert conflicts[0].overlap == Interval(start=570, end=600)
    assert conflicts[1].overlap == Interval(start=540, end=560)


def test_find_internal_overlaps():
    pairs = find_internal_overlaps([item(600, 700), item(540, 610), item(700, 760)])
    assert len(pairs) == 1
    first, second = pairs[0]
    assert first.interval == Interval(start=540, end=610)
    assert second.interval == Interval(start=600, end=700)
