"""
SQLite implementation of Day repository.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateError, NotFoundError
from app.infrastructure.local.database import DayBlockORM, DayORM, get_session_factory
from app.interfaces.day_repository import IDayRepository
from app.models.day import DayBlock, DayPack
from app.models.enums import BlockStatus, DepthLevel, ItemOrigin
from app.models.schedule import Interval, ResolutionResult
from app.utils.datetime_utils import ensure_utc


class SqliteDayRepository(IDayRepository):
    """SQLite implementation of day repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _block_to_model(self, orm: DayBlockORM) -> DayBlock:
        return DayBlock(
            id=orm.id,
            interval=Interval(start=orm.start_min, end=orm.end_min),
            depth_level=DepthLevel(orm.depth_level),
            goal_id=orm.goal_id,
            label=orm.label,
            status=BlockStatus(orm.status),
            actual_sec=orm.actual_sec or 0,
            origin=ItemOrigin(orm.origin),
        )

    def _block_to_orm(self, day_id: str, block: DayBlock) -> DayBlockORM:
        return DayBlockORM(
            id=block.id,
            day_id=day_id,
            start_min=block.interval.start,
            end_min=block.interval.end,
            depth_level=int(block.depth_level),
            goal_id=block.goal_id,
            label=block.label,
            status=block.status.value,
            actual_sec=block.actual_sec,
            origin=block.origin.value,
        )

    async def _get_day_orm(
        self, session: AsyncSession, user_id: str, day: date
    ) -> Optional[DayORM]:
        result = await session.execute(
            select(DayORM).where(
                and_(DayORM.user_id == user_id, DayORM.date_iso == day.isoformat())
            )
        )
        return result.scalar_one_or_none()

    async def _load_pack(self, session: AsyncSession, orm: DayORM) -> DayPack:
        result = await session.execute(
            select(DayBlockORM)
            .where(DayBlockORM.day_id == orm.id)
            .order_by(DayBlockORM.start_min)
        )
        return DayPack(
            user_id=orm.user_id,
            date=date.fromisoformat(orm.date_iso),
            opened_at=ensure_utc(orm.opened_at) if orm.opened_at else None,
            shutdown_at=ensure_utc(orm.shutdown_at) if orm.shutdown_at else None,
            journal=orm.journal,
            blocks=[self._block_to_model(b) for b in result.scalars().all()],
        )

    async def get(self, user_id: str, day: date) -> Optional[DayPack]:
        async with self._session_factory() as session:
            orm = await self._get_day_orm(session, user_id, day)
            if not orm:
                return None
            return await self._load_pack(session, orm)

    async def create(self, pack: DayPack) -> DayPack:
        async with self._session_factory() as session:
            if await self._get_day_orm(session, pack.user_id, pack.date):
                raise DuplicateError(
                    f"Day {pack.date.isoformat()} already exists",
                    details={"date": pack.date.isoformat()},
                )
            orm = DayORM(
                user_id=pack.user_id,
                date_iso=pack.date.isoformat(),
                opened_at=pack.opened_at,
                shutdown_at=pack.shutdown_at,
                journal=pack.journal,
            )
            session.add(orm)
            await session.flush()
            for block in pack.blocks:
                session.add(self._block_to_orm(orm.id, block))
            await session.commit()
            return await self._load_pack(session, orm)

    async def save(self, pack: DayPack) -> DayPack:
        async with self._session_factory() as session:
            orm = await self._get_day_orm(session, pack.user_id, pack.date)
            if not orm:
                raise NotFoundError(
                    f"Day {pack.date.isoformat()} not found",
                    details={"date": pack.date.isoformat()},
                )
            orm.opened_at = pack.opened_at
            orm.shutdown_at = pack.shutdown_at
            orm.journal = pack.journal

            result = await session.execute(
                select(DayBlockORM).where(DayBlockORM.day_id == orm.id)
            )
            stored = {b.id: b for b in result.scalars().all()}
            for block in pack.blocks:
                block_orm = stored.get(block.id)
                if not block_orm:
                    continue
                block_orm.depth_level = int(block.depth_level)
                block_orm.goal_id = block.goal_id
                block_orm.status = block.status.value
                block_orm.actual_sec = block.actual_sec

            await session.commit()
            return await self._load_pack(session, orm)

    async def apply_resolution(
        self, user_id: str, day: date, resolution: ResolutionResult
    ) -> DayPack:
        async with self._session_factory() as session:
            orm = await self._get_day_orm(session, user_id, day)
            if not orm:
                orm = DayORM(user_id=user_id, date_iso=day.isoformat())
                session.add(orm)
                await session.flush()

            removed_ids = [item.id for item in resolution.removed if item.id]
            if removed_ids:
                await session.execute(
                    delete(DayBlockORM).where(
                        and_(DayBlockORM.day_id == orm.id, DayBlockORM.id.in_(removed_ids))
                    )
                )
            for item in resolution.inserted:
                session.add(
                    DayBlockORM(
                        day_id=orm.id,
                        start_min=item.interval.start,
                        end_min=item.interval.end,
                        depth_level=int(item.depth_level),
                        goal_id=item.goal_id,
                        label=item.label,
                        status=BlockStatus.PLANNED.value,
                        actual_sec=0,
                        origin=item.origin.value,
                    )
                )
            await session.commit()
            return await self._load_pack(session, orm)
