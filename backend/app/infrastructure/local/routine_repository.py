"""
SQLite implementation of the standing routine repository.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from sqlalchemy import and_, delete, select

from app.infrastructure.local.database import (
    RoutineItemORM,
    RoutineWindowORM,
    get_session_factory,
)
from app.interfaces.routine_repository import IRoutineRepository
from app.models.enums import DepthLevel, ItemOrigin
from app.models.schedule import Interval, ResolutionResult, ScheduleItem, Window


class SqliteRoutineRepository(IRoutineRepository):
    """SQLite implementation of routine repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_item(self, orm: RoutineItemORM) -> ScheduleItem:
        return ScheduleItem(
            id=orm.id,
            interval=Interval(start=orm.start_min, end=orm.end_min),
            depth_level=DepthLevel(orm.depth_level),
            goal_id=orm.goal_id,
            label=orm.label,
            origin=ItemOrigin.STANDING,
        )

    async def get_items(self, user_id: str, weekday: int) -> list[ScheduleItem]:
        result = await self.get_items_by_weekday(user_id, [weekday])
        return result[weekday]

    async def get_items_by_weekday(
        self, user_id: str, weekdays: Iterable[int]
    ) -> dict[int, list[ScheduleItem]]:
        weekdays = sorted(set(weekdays))
        items: dict[int, list[ScheduleItem]] = {weekday: [] for weekday in weekdays}
        if not weekdays:
            return items
        async with self._session_factory() as session:
            result = await session.execute(
                select(RoutineItemORM)
                .where(
                    and_(
                        RoutineItemORM.user_id == user_id,
                        RoutineItemORM.weekday.in_(weekdays),
                    )
                )
                .order_by(RoutineItemORM.weekday, RoutineItemORM.start_min)
            )
            for orm in result.scalars().all():
                items[orm.weekday].append(self._orm_to_item(orm))
        return items

    async def get_windows(
        self, user_id: str, weekdays: Iterable[int]
    ) -> dict[int, Optional[Window]]:
        weekdays = sorted(set(weekdays))
        windows: dict[int, Optional[Window]] = {weekday: None for weekday in weekdays}
        if not weekdays:
            return windows
        async with self._session_factory() as session:
            result = await session.execute(
                select(RoutineWindowORM).where(
                    and_(
                        RoutineWindowORM.user_id == user_id,
                        RoutineWindowORM.weekday.in_(weekdays),
                    )
                )
            )
            for orm in result.scalars().all():
                windows[orm.weekday] = Window(open_min=orm.open_min, close_min=orm.close_min)
        return windows

    async def set_window(self, user_id: str, weekdays: Iterable[int], window: Window) -> None:
        weekdays = sorted(set(weekdays))
        async with self._session_factory() as session:
            await session.execute(
                delete(RoutineWindowORM).where(
                    and_(
                        RoutineWindowORM.user_id == user_id,
                        RoutineWindowORM.weekday.in_(weekdays),
                    )
                )
            )
            for weekday in weekdays:
                session.add(
                    RoutineWindowORM(
                        user_id=user_id,
                        weekday=weekday,
                        open_min=window.open_min,
                        close_min=window.close_min,
                    )
                )
            await session.commit()

    async def apply_resolutions(
        self, user_id: str, resolutions: Mapping[int, ResolutionResult]
    ) -> None:
        async with self._session_factory() as session:
            for weekday, resolution in resolutions.items():
                removed_ids = [item.id for item in resolution.removed if item.id]
                if removed_ids:
                    await session.execute(
                        delete(RoutineItemORM).where(
                            and_(
                                RoutineItemORM.user_id == user_id,
                                RoutineItemORM.weekday == weekday,
                                RoutineItemORM.id.in_(removed_ids),
                            )
                        )
                    )
                for item in resolution.inserted:
                    session.add(
                        RoutineItemORM(
                            user_id=user_id,
                            weekday=weekday,
                            start_min=item.interval.start,
                            end_min=item.interval.end,
                            depth_level=int(item.depth_level),
                            goal_id=item.goal_id,
                            label=item.label,
                        )
                    )
                await session.flush()

                # Keep order_index in start order for the whole weekday
                result = await session.execute(
                    select(RoutineItemORM)
                    .where(
                        and_(
                            RoutineItemORM.user_id == user_id,
                            RoutineItemORM.weekday == weekday,
                        )
                    )
                    .order_by(RoutineItemORM.start_min)
                )
                for index, orm in enumerate(result.scalars().all()):
                    orm.order_index = index
            await session.commit()

    async def clear_weekday(self, user_id: str, weekday: int) -> None:
        async with self._session_factory() as session:
            await session.execute(
                delete(RoutineItemORM).where(
                    and_(RoutineItemORM.user_id == user_id, RoutineItemORM.weekday == weekday)
                )
            )
            await session.execute(
                delete(RoutineWindowORM).where(
                    and_(RoutineWindowORM.user_id == user_id, RoutineWindowORM.weekday == weekday)
                )
            )
            await session.commit()
