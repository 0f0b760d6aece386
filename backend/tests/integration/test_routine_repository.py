"""
Integration tests for the SQLite routine repository.
"""

import pytest
from sqlalchemy import select

from app.infrastructure.local.database import RoutineItemORM
from app.infrastructure.local.routine_repository import SqliteRoutineRepository
from app.models.enums import DepthLevel, ResolutionStrategy
from app.models.schedule import Interval, ScheduleItem, Window
from app.services.resolution_service import resolve, resolve_weekdays


def item(start: int, end: int, label: str | None = None, goal_id: str = "g1") -> ScheduleItem:
    return ScheduleItem(
        interval=Interval(start=start, end=end),
        label=label,
        goal_id=goal_id,
        depth_level=DepthLevel.DEEP,
    )


@pytest.mark.asyncio
async def test_empty_routine(session_factory, test_user_id):
    repo = SqliteRoutineRepository(session_factory=session_factory)

    assert await repo.get_items(test_user_id, 1) == []
    assert await repo.get_windows(test_user_id, [1, 2]) == {1: None, 2: None}


@pytest.mark.asyncio
async def test_apply_resolutions_inserts_sorted(session_factory, test_user_id):
    repo = SqliteRoutineRepository(session_factory=session_factory)
    proposed = [item(780, 840, "Late"), item(540, 600, "Early")]

    resolutions = resolve_weekdays({1: proposed, 2: proposed}, {1: [], 2: []}, {1: None, 2: None})
    await repo.apply_resolutions(test_user_id, resolutions)

    by_weekday = await repo.get_items_by_weekday(test_user_id, [1, 2, 3])
    assert [i.label for i in by_weekday[1]] == ["Early", "Late"]
    assert [i.label for i in by_weekday[2]] == ["Early", "Late"]
    assert by_weekday[3] == []
    assert all(i.id for i in by_weekday[1])

    async with session_factory() as session:
        rows = (
            await session.execute(
                select(RoutineItemORM)
                .where(RoutineItemORM.weekday == 1)
                .order_by(RoutineItemORM.start_min)
            )
        ).scalars().all()
    assert [row.order_index for row in rows] == [0, 1]


@pytest.mark.asyncio
async def test_merge_overwrite_deletes_replaced_rows(session_factory, test_user_id):
    repo = SqliteRoutineRepository(session_factory=session_factory)
    await repo.apply_resolutions(
        test_user_id, {1: resolve([item(600, 720, "Old"), item(800, 860, "Keep")], [])}
    )

    existing = await repo.get_items(test_user_id, 1)
    resolution = resolve(
        [item(660, 780, "New")], existing, ResolutionStrategy.MERGE_OVERWRITE
    )
    await repo.apply_resolutions(test_user_id, {1: resolution})

    assert [i.label for i in await repo.get_items(test_user_id, 1)] == ["New", "Keep"]


@pytest.mark.asyncio
async def test_set_window_replaces(session_factory, test_user_id):
    repo = SqliteRoutineRepository(session_factory=session_factory)

    await repo.set_window(test_user_id, [1, 2], Window(open_min=480, close_min=1080))
    await repo.set_window(test_user_id, [2], Window(open_min=540, close_min=1020))

    windows = await repo.get_windows(test_user_id, [1, 2])
    assert windows[1] == Window(open_min=480, close_min=1080)
    assert windows[2] == Window(open_min=540, close_min=1020)


@pytest.mark.asyncio
async def test_clear_weekday_removes_items_and_window(session_factory, test_user_id):
    repo = SqliteRoutineRepository(session_factory=session_factory)
    await repo.set_window(test_user_id, [1, 2], Window(open_min=480, close_min=1080))
    await repo.apply_resolutions(
        test_user_id,
        {1: resolve([item(540, 600)], []), 2: resolve([item(540, 600)], [])},
    )

    await repo.clear_weekday(test_user_id, 1)

    assert await repo.get_items(test_user_id, 1) == []
    assert (await repo.get_windows(test_user_id, [1]))[1] is None
    assert len(await repo.get_items(test_user_id, 2)) == 1


@pytest.mark.asyncio
async def test_users_are_isolated(session_factory, test_user_id):
    repo = SqliteRoutineRepository(session_factory=session_factory)
    await repo.apply_resolutions(test_user_id, {1: resolve([item(540, 600)], [])})

    assert await repo.get_items("someone_else", 1) == []
