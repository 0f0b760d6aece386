"""
Planner service.

Wires the scheduling engine to the routine and day repositories. Each
mutation reads the current state, resolves it and persists the result while
holding the lock of its scope, (user, routine) or (user, date), so two
concurrent proposals for the same scope cannot lose an update. Routine writes
also take today's day lock, always after the routine lock.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Iterable, Optional

from app.core.config import Settings, get_settings
from app.core.exceptions import (
    DayGateError,
    NotFoundError,
    ValidationError,
    WeekdayLockedError,
)
from app.core.logger import setup_logger
from app.interfaces.day_repository import IDayRepository
from app.interfaces.routine_repository import IRoutineRepository
from app.models.day import DayBlockUpdate, DayPack, DayPlanResponse, DaySummary
from app.models.enums import DepthLevel, ItemOrigin, ResolutionStrategy, WindowMode
from app.models.routine import (
    BlockProposal,
    ConflictPreview,
    RoutineView,
    StandingBlockProposal,
    StandingPushResponse,
    WeekdayResolution,
)
from app.models.schedule import ScheduleItem, Window
from app.services import day_service
from app.services.conflict_detector import detect_weekday_conflicts
from app.services.lock_gate import ensure_unlocked
from app.services.resolution_service import resolve, resolve_weekdays
from app.services.sprint_composer import build_sprint_items
from app.utils.datetime_utils import minute_of_day, now_utc, weekday_of, weekday_name

logger = setup_logger(__name__)


class PlannerService:
    """Standing routine, single-day plans and the day lifecycle."""

    def __init__(
        self,
        routine_repo: IRoutineRepository,
        day_repo: IDayRepository,
        settings: Optional[Settings] = None,
    ):
        self.routine_repo = routine_repo
        self.day_repo = day_repo
        self.settings = settings or get_settings()
        self._locks: defaultdict[tuple[str, str], asyncio.Lock] = defaultdict(asyncio.Lock)

    # ===========================================
    # Helpers
    # ===========================================

    def _lock(self, user_id: str, scope: str) -> asyncio.Lock:
        return self._locks[(user_id, scope)]

    def _routine_lock(self, user_id: str) -> asyncio.Lock:
        return self._lock(user_id, "routine")

    def _day_lock(self, user_id: str, day: date) -> asyncio.Lock:
        return self._lock(user_id, day.isoformat())

    @property
    def _default_depth(self) -> DepthLevel:
        return DepthLevel(self.settings.DEFAULT_DEPTH_LEVEL)

    def _build_items(self, block: BlockProposal, origin: ItemOrigin) -> list[ScheduleItem]:
        return build_sprint_items(
            block.to_item(origin, self._default_depth),
            block.breaks,
            self.settings.SPRINT_LABEL_TEMPLATE,
        )

    def _build_standing(
        self, blocks: Iterable[StandingBlockProposal]
    ) -> dict[int, list[ScheduleItem]]:
        proposed: dict[int, list[ScheduleItem]] = {}
        for index, block in enumerate(blocks):
            if not block.goal_id:
                raise ValidationError(
                    "Standing blocks require a goal",
                    details={"block_index": index},
                )
            items = self._build_items(block, ItemOrigin.STANDING)
            for weekday in sorted(set(block.days)):
                proposed.setdefault(weekday, []).extend(items)
        return proposed

    async def _ensure_unlocked(self, user_id: str, weekdays: Iterable[int], today: date) -> None:
        today_pack = await self.day_repo.get(user_id, today)
        record = today_pack.record if today_pack else None
        for weekday in sorted(set(weekdays)):
            try:
                ensure_unlocked(weekday, today, record)
            except WeekdayLockedError:
                logger.warning(
                    "Refused routine change for %s (%s): day is open",
                    weekday_name(weekday),
                    user_id,
                )
                raise

    @asynccontextmanager
    async def _routine_write(self, user_id: str, weekdays: Iterable[int], today: date):
        """
        Hold the routine lock, then today's day lock, for a gated routine write.

        Today's day cannot be opened between the lock check and the write.
        """
        async with self._routine_lock(user_id), self._day_lock(user_id, today):
            await self._ensure_unlocked(user_id, weekdays, today)
            yield

    async def _window_of(self, user_id: str, day: date) -> Optional[Window]:
        weekday = weekday_of(day)
        windows = await self.routine_repo.get_windows(user_id, [weekday])
        return windows.get(weekday)

    async def _require_day(self, user_id: str, day: date) -> DayPack:
        pack = await self.day_repo.get(user_id, day)
        if not pack:
            raise NotFoundError(
                f"Day {day.isoformat()} not found", details={"date": day.isoformat()}
            )
        return pack

    async def _materialize_day(self, user_id: str, day: date) -> DayPack:
        standing = await self.routine_repo.get_items(user_id, weekday_of(day))
        created = await self.day_repo.create(day_service.instantiate_day(user_id, day, standing))
        logger.info(
            "Opened day %s for %s with %d standing blocks",
            day.isoformat(),
            user_id,
            len(created.blocks),
        )
        return created

    async def _open_planned_day(self, pack: DayPack) -> DayPack:
        """Open a day that already holds single-day blocks."""
        standing = await self.routine_repo.get_items(pack.user_id, weekday_of(pack.date))
        resolution = resolve(
            standing,
            [block.as_schedule_item() for block in pack.blocks],
            ResolutionStrategy.ONLY_NEW_IN_GAPS,
        )
        pack = await self.day_repo.apply_resolution(pack.user_id, pack.date, resolution)
        pack = await self.day_repo.save(pack.model_copy(update={"opened_at": now_utc()}))
        logger.info(
            "Opened day %s for %s: %d standing blocks fitted around %d planned, %d dropped",
            pack.date.isoformat(),
            pack.user_id,
            len(resolution.inserted),
            len(resolution.kept),
            len(resolution.dropped),
        )
        return pack

    # ===========================================
    # Standing routine
    # ===========================================

    async def get_routine(self, user_id: str, weekday: int) -> RoutineView:
        items = await self.routine_repo.get_items(user_id, weekday)
        windows = await self.routine_repo.get_windows(user_id, [weekday])
        return RoutineView(weekday=weekday, items=items, window=windows.get(weekday))

    async def set_window(
        self, user_id: str, days: Iterable[int], window: Window, today: date
    ) -> list[RoutineView]:
        days = sorted(set(days))
        async with self._routine_write(user_id, days, today):
            await self.routine_repo.set_window(user_id, days, window)
        logger.info("Set window %s on %s for %s", window.interval, days, user_id)
        return [await self.get_routine(user_id, weekday) for weekday in days]

    async def clear_weekday(self, user_id: str, weekday: int, today: date) -> None:
        async with self._routine_write(user_id, [weekday], today):
            await self.routine_repo.clear_weekday(user_id, weekday)
        logger.info("Cleared routine for %s (%s)", weekday_name(weekday), user_id)

    async def preview_standing_conflicts(
        self, user_id: str, blocks: Iterable[StandingBlockProposal]
    ) -> ConflictPreview:
        """Report what a standing push would collide with, without writing."""
        proposed = self._build_standing(blocks)
        existing = await self.routine_repo.get_items_by_weekday(user_id, proposed.keys())
        return ConflictPreview(conflicts=detect_weekday_conflicts(proposed, existing))

    async def push_standing(
        self,
        user_id: str,
        blocks: Iterable[StandingBlockProposal],
        strategy: Optional[ResolutionStrategy],
        confirm_replace: bool,
        today: date,
    ) -> StandingPushResponse:
        """
        Push blocks into the standing routine of every weekday they name.

        All weekdays are resolved before anything is written; a refusal on one
        weekday leaves the whole routine unchanged.

        Raises:
            ValidationError: Block without a goal, or blocks overlap each other
            FullyCoveredError: Breaks consume a whole block
            OutsideWindowError: A sprint leaves its weekday's window
            WeekdayLockedError: One of the weekdays is today's and the day is open
            ConflictError: Conflicts found and no strategy given
        """
        proposed = self._build_standing(blocks)
        weekdays = sorted(proposed)
        async with self._routine_write(user_id, weekdays, today):
            existing = await self.routine_repo.get_items_by_weekday(user_id, weekdays)
            windows = await self.routine_repo.get_windows(user_id, weekdays)
            resolutions = resolve_weekdays(
                proposed, existing, windows, strategy, confirm_replace=confirm_replace
            )
            await self.routine_repo.apply_resolutions(user_id, resolutions)

        response = StandingPushResponse(
            results=[
                WeekdayResolution(weekday=weekday, resolution=resolutions[weekday])
                for weekday in weekdays
            ]
        )
        logger.info(
            "Pushed %d standing items to %s for %s (strategy=%s)",
            response.inserted_count,
            [weekday_name(w) for w in weekdays],
            user_id,
            strategy.value if strategy else None,
        )
        return response

    # ===========================================
    # Days
    # ===========================================

    async def open_day(
        self,
        user_id: str,
        day: date,
        autocreate: bool = False,
        now_min: Optional[int] = None,
        bypass_window: bool = False,
    ) -> DayPack:
        """
        Get a day, opening it from the standing routine when autocreate is set.

        Standing items are copied at open time. A day that already holds
        single-day blocks gets the standing items fitted into its gaps.

        Raises:
            NotFoundError: No day and autocreate is off
            DayGateError: Opening outside the grace period of the weekday window
        """
        async with self._day_lock(user_id, day):
            pack = await self.day_repo.get(user_id, day)
            if pack is not None and (pack.opened_at is not None or not autocreate):
                return pack
            if pack is None and not autocreate:
                raise NotFoundError(
                    f"Day {day.isoformat()} not found",
                    details={"date": day.isoformat()},
                )

            if not bypass_window:
                window = await self._window_of(user_id, day)
                now_min = minute_of_day(datetime.now()) if now_min is None else now_min
                try:
                    day_service.ensure_can_open(window, now_min)
                except DayGateError:
                    logger.warning("Refused to open %s for %s at minute %d", day, user_id, now_min)
                    raise

            if pack is None:
                return await self._materialize_day(user_id, day)
            return await self._open_planned_day(pack)

    async def plan_single_day(
        self,
        user_id: str,
        day: date,
        blocks: Iterable[BlockProposal],
        strategy: Optional[ResolutionStrategy] = None,
        confirm_replace: bool = False,
    ) -> DayPlanResponse:
        """
        Add one-off blocks to a date.

        A date with no day yet gets an unopened day holding only these blocks.
        """
        proposed: list[ScheduleItem] = []
        for block in blocks:
            proposed.extend(self._build_items(block, ItemOrigin.SINGLE_DAY))

        async with self._day_lock(user_id, day):
            pack = await self.day_repo.get(user_id, day)
            existing = [block.as_schedule_item() for block in pack.blocks] if pack else []
            resolution = resolve(
                proposed,
                existing,
                strategy,
                window=await self._window_of(user_id, day),
                window_mode=WindowMode.REJECT,
                confirm_replace=confirm_replace,
            )
            pack = await self.day_repo.apply_resolution(user_id, day, resolution)

        logger.info(
            "Planned %d single-day items on %s for %s (strategy=%s)",
            len(resolution.inserted),
            day.isoformat(),
            user_id,
            strategy.value if strategy else None,
        )
        return DayPlanResponse(pack=pack, resolution=resolution)

    async def update_block(
        self, user_id: str, day: date, block_id: str, patch: DayBlockUpdate
    ) -> DayPack:
        async with self._day_lock(user_id, day):
            pack = await self._require_day(user_id, day)
            return await self.day_repo.save(day_service.update_block(pack, block_id, patch))

    async def start_block(self, user_id: str, day: date, block_id: str) -> DayPack:
        async with self._day_lock(user_id, day):
            pack = await self._require_day(user_id, day)
            pack = await self.day_repo.save(day_service.start_block(pack, block_id))
        logger.info("Started block %s on %s for %s", block_id, day.isoformat(), user_id)
        return pack

    async def stop_active(self, user_id: str, day: date) -> DayPack:
        async with self._day_lock(user_id, day):
            pack = await self._require_day(user_id, day)
            return await self.day_repo.save(day_service.stop_active(pack))

    async def shutdown_day(
        self,
        user_id: str,
        day: date,
        journal: Optional[str] = None,
        now_min: Optional[int] = None,
        bypass_window: bool = False,
    ) -> DayPack:
        """
        Shut the day down, ending the active block and unlocking its weekday.

        Raises:
            NotFoundError: No such day
            DayGateError: Shutting down outside the grace period of the window close
        """
        async with self._day_lock(user_id, day):
            pack = await self._require_day(user_id, day)
            if not bypass_window:
                window = await self._window_of(user_id, day)
                now_min = minute_of_day(datetime.now()) if now_min is None else now_min
                try:
                    day_service.ensure_can_shutdown(window, now_min)
                except DayGateError:
                    logger.warning(
                        "Refused to shut down %s for %s at minute %d", day, user_id, now_min
                    )
                    raise
            pack = await self.day_repo.save(day_service.shutdown(pack, journal))
        logger.info("Shut down day %s for %s", day.isoformat(), user_id)
        return pack

    async def summarize_day(self, user_id: str, day: date) -> DaySummary:
        pack = await self._require_day(user_id, day)
        return day_service.summarize(pack)
