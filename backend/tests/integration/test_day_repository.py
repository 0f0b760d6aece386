"""
Integration tests for the SQLite day repository.
"""

from datetime import date, datetime, timezone

import pytest

from app.core.exceptions import DuplicateError, NotFoundError
from app.infrastructure.local.day_repository import SqliteDayRepository
from app.models.enums import BlockStatus, ItemOrigin, ResolutionStrategy
from app.models.schedule import Interval, ScheduleItem
from app.services import day_service
from app.services.resolution_service import resolve

DAY = date(2026, 10, 19)
OPENED = datetime(2026, 10, 19, 7, 30, tzinfo=timezone.utc)


def standing(start: int, end: int, label: str) -> ScheduleItem:
    return ScheduleItem(interval=Interval(start=start, end=end), label=label, goal_id="g1")


@pytest.mark.asyncio
async def test_get_missing_day(session_factory, test_user_id):
    repo = SqliteDayRepository(session_factory=session_factory)
    assert await repo.get(test_user_id, DAY) is None


@pytest.mark.asyncio
async def test_create_and_get_roundtrip(session_factory, test_user_id):
    repo = SqliteDayRepository(session_factory=session_factory)
    pack = day_service.instantiate_day(
        test_user_id,
        DAY,
        [standing(780, 840, "B"), standing(540, 600, "A")],
        opened_at=OPENED,
    )

    await repo.create(pack)
    loaded = await repo.get(test_user_id, DAY)

    assert loaded.opened_at == OPENED
    assert loaded.shutdown_at is None
    assert [b.label for b in loaded.blocks] == ["A", "B"]
    assert [b.id for b in loaded.blocks] == [b.id for b in pack.blocks]


@pytest.mark.asyncio
async def test_create_twice_raises(session_factory, test_user_id):
    repo = SqliteDayRepository(session_factory=session_factory)
    pack = day_service.instantiate_day(test_user_id, DAY, [], opened_at=OPENED)
    await repo.create(pack)

    with pytest.raises(DuplicateError):
        await repo.create(pack)


@pytest.mark.asyncio
async def test_save_updates_blocks_and_shutdown(session_factory, test_user_id):
    repo = SqliteDayRepository(session_factory=session_factory)
    pack = await repo.create(
        day_service.instantiate_day(test_user_id, DAY, [standing(540, 600, "A")], opened_at=OPENED)
    )
    block_id = pack.blocks[0].id

    pack = await repo.save(day_service.start_block(pack, block_id))
    assert pack.blocks[0].status == BlockStatus.ACTIVE

    closed_at = datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc)
    await repo.save(day_service.shutdown(pack, journal="Shipped it", at=closed_at))

    loaded = await repo.get(test_user_id, DAY)
    assert loaded.blocks[0].status == BlockStatus.DONE
    assert loaded.shutdown_at == closed_at
    assert loaded.journal == "Shipped it"


@pytest.mark.asyncio
async def test_save_missing_day_raises(session_factory, test_user_id):
    repo = SqliteDayRepository(session_factory=session_factory)
    pack = day_service.instantiate_day(test_user_id, DAY, [], opened_at=OPENED)

    with pytest.raises(NotFoundError):
        await repo.save(pack)


@pytest.mark.asyncio
async def test_apply_resolution_creates_day(session_factory, test_user_id):
    repo = SqliteDayRepository(session_factory=session_factory)
    proposal = ScheduleItem(
        interval=Interval(start=600, end=660), label="Dentist", origin=ItemOrigin.SINGLE_DAY
    )

    pack = await repo.apply_resolution(test_user_id, DAY, resolve([proposal], []))

    assert pack.opened_at is None
    assert len(pack.blocks) == 1
    assert pack.blocks[0].origin == ItemOrigin.SINGLE_DAY
    assert pack.blocks[0].status == BlockStatus.PLANNED


@pytest.mark.asyncio
async def test_apply_resolution_merge_overwrite(session_factory, test_user_id):
    repo = SqliteDayRepository(session_factory=session_factory)
    pack = await repo.create(
        day_service.instantiate_day(
            test_user_id,
            DAY,
            [standing(540, 660, "Deep"), standing(700, 760, "Review")],
            opened_at=OPENED,
        )
    )
    proposal = ScheduleItem(
        interval=Interval(start=600, end=690), label="Call", origin=ItemOrigin.SINGLE_DAY
    )

    resolution = resolve(
        [proposal],
        [b.as_schedule_item() for b in pack.blocks],
        ResolutionStrategy.MERGE_OVERWRITE,
    )
    pack = await repo.apply_resolution(test_user_id, DAY, resolution)

    assert [b.label for b in pack.blocks] == ["Call", "Review"]
