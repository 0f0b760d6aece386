"""
Unit tests for sprint composition.
"""

import pytest

from app.core.exceptions import FullyCoveredError, ValidationError
from app.models.enums import DepthLevel, ItemOrigin
from app.models.schedule import Interval, ScheduleItem
from app.services.sprint_composer import build_sprint_items, compose_sprints


def iv(start: int, end: int) -> Interval:
    return Interval(start=start, end=end)


class TestComposeSprints:
    def test_no_breaks_yields_block(self):
        result = compose_sprints(iv(540, 720), [])
        assert result.sprints == [iv(540, 720)]
        assert result.normalized_breaks == []

    def test_single_break_splits_block(self):
        # 09:00-12:00 with a 10:30-10:45 break
        result = compose_sprints(iv(540, 720), [iv(630, 645)])
        assert result.sprints == [iv(540, 630), iv(645, 720)]

    def test_overlapping_breaks_are_normalized(self):
        result = compose_sprints(iv(540, 720), [iv(640, 660), iv(600, 620), iv(610, 645)])
        assert result.normalized_breaks == [iv(600, 660)]
        assert result.sprints == [iv(540, 600), iv(660, 720)]

    def test_break_at_block_start(self):
        result = compose_sprints(iv(540, 720), [iv(540, 560)])
        assert result.sprints == [iv(560, 720)]

    def test_fully_covered_raises(self):
        with pytest.raises(FullyCoveredError) as exc_info:
            compose_sprints(iv(540, 600), [iv(540, 570), iv(570, 600)])
        assert exc_info.value.details["block"] == {"start": 540, "end": 600}

    def test_break_outside_block_raises(self):
        with pytest.raises(ValidationError):
            compose_sprints(iv(540, 600), [iv(590, 620)])

    def test_idempotent_with_normalized_breaks(self):
        first = compose_sprints(iv(0, 300), [iv(50, 70), iv(60, 90), iv(200, 210)])
        second = compose_sprints(iv(0, 300), first.normalized_breaks)
        assert first.sprints == second.sprints


class TestBuildSprintItems:
    def test_labelled_block_numbers_sprints(self):
        block = ScheduleItem(
            interval=iv(540, 720),
            label="Write",
            depth_level=DepthLevel.DEEP,
            goal_id="g1",
            origin=ItemOrigin.STANDING,
        )
        items = build_sprint_items(block, [iv(630, 645)])

        assert [item.label for item in items] == ["Write — Sprint 1", "Write — Sprint 2"]
        assert [item.interval for item in items] == [iv(540, 630), iv(645, 720)]
        assert all(item.goal_id == "g1" for item in items)
        assert all(item.depth_level == DepthLevel.DEEP for item in items)

    def test_single_sprint_still_labelled(self):
        block = ScheduleItem(interval=iv(540, 600), label="Read")
        items = build_sprint_items(block, [])
        assert [item.label for item in items] == ["Read — Sprint 1"]

    def test_unlabelled_block_gives_unlabelled_sprints(self):
        block = ScheduleItem(interval=iv(540, 720), depth_level=DepthLevel.SHALLOW)
        items = build_sprint_items(block, [iv(600, 610)])
        assert [item.label for item in items] == [None, None]
        assert all(item.depth_level == DepthLevel.SHALLOW for item in items)

    def test_custom_label_template(self):
        block = ScheduleItem(interval=iv(0, 60), label="Focus")
        items = build_sprint_items(block, [iv(20, 30)], label_template="{label} #{index}")
        assert [item.label for item in items] == ["Focus #1", "Focus #2"]
