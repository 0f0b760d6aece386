"""
Property-based tests for scheduling invariants using Hypothesis.
"""

from datetime import date, datetime, timedelta, timezone

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from app.core.exceptions import FullyCoveredError
from app.models.day import DayRecord
from app.models.enums import ResolutionStrategy, WindowMode
from app.models.schedule import Interval, ScheduleItem, Window
from app.services.lock_gate import is_locked
from app.services.range_algebra import intersect, merge, subtract, within
from app.services.resolution_service import resolve
from app.services.sprint_composer import compose_sprints
from app.services.window_enforcement import enforce_window
from app.utils.datetime_utils import weekday_of


@st.composite
def intervals(draw, lo: int = 0, hi: int = 1440) -> Interval:
    start = draw(st.integers(min_value=lo, max_value=hi - 1))
    end = draw(st.integers(min_value=start + 1, max_value=hi))
    return Interval(start=start, end=end)


@st.composite
def disjoint_items(draw, prefix: str) -> list[ScheduleItem]:
    spans = merge(draw(st.lists(intervals(), max_size=8)))
    return [
        ScheduleItem(interval=span, label=f"{prefix}{i}", id=f"{prefix}{i}")
        for i, span in enumerate(spans)
    ]


def assert_disjoint(items: list[ScheduleItem]) -> None:
    for i, a in enumerate(items):
        for b in items[i + 1:]:
            assert intersect(a.interval, b.interval) is None


# ============================================================================
# Range algebra
# ============================================================================


@given(intervals(), st.lists(intervals(), max_size=10))
def test_subtract_and_blockers_tile_base(base: Interval, blockers: list[Interval]):
    """Gaps plus the clipped blockers cover the base exactly."""
    gaps = subtract(base, blockers)
    clipped = [part for part in (intersect(b, base) for b in merge(blockers)) if part]

    assert merge(gaps + clipped) == [base]
    for gap in gaps:
        assert within(gap, base)
        assert all(intersect(gap, b) is None for b in blockers)


@given(st.lists(intervals(), max_size=10))
def test_merge_is_idempotent(spans: list[Interval]):
    once = merge(spans)
    assert merge(once) == once


# ============================================================================
# Sprints and windows
# ============================================================================


@given(intervals(), st.data())
def test_compose_sprints_idempotent(block: Interval, data):
    breaks = data.draw(st.lists(intervals(block.start, block.end), max_size=5))
    try:
        first = compose_sprints(block, breaks)
    except FullyCoveredError:
        return
    second = compose_sprints(block, first.normalized_breaks)
    assert first.sprints == second.sprints


@given(st.lists(intervals(), max_size=10), intervals())
def test_window_clip_containment(spans: list[Interval], bounds: Interval):
    window = Window(open_min=bounds.start, close_min=bounds.end)
    for clipped in enforce_window(spans, window, WindowMode.CLIP):
        assert within(clipped, bounds)


# ============================================================================
# Resolution
# ============================================================================


@settings(max_examples=200)
@given(
    disjoint_items("p"),
    disjoint_items("e"),
    st.sampled_from(list(ResolutionStrategy)),
)
def test_resolved_sets_are_disjoint(proposed, existing, strategy):
    result = resolve(proposed, existing, strategy, confirm_replace=True)
    assert_disjoint(result.items)


@given(disjoint_items("p"), disjoint_items("e"))
def test_only_new_in_gaps_never_touches_existing(proposed, existing):
    assume(existing)
    result = resolve(proposed, existing, ResolutionStrategy.ONLY_NEW_IN_GAPS)

    assert result.removed == []
    for fragment in result.inserted:
        for item in existing:
            assert intersect(fragment.interval, item.interval) is None


# ============================================================================
# Lock gate
# ============================================================================


@given(
    st.integers(min_value=0, max_value=6),
    st.dates(min_value=date(2000, 1, 1), max_value=date(2100, 12, 31)),
    st.booleans(),
    st.booleans(),
)
def test_lock_truth_table(weekday: int, today: date, opened: bool, shut_down: bool):
    stamp = datetime(2026, 1, 1, tzinfo=timezone.utc)
    record = DayRecord(
        opened_at=stamp if opened else None,
        shutdown_at=stamp + timedelta(hours=10) if shut_down else None,
    )
    expected = weekday == weekday_of(today) and opened and not shut_down
    assert is_locked(weekday, today, record) is expected
