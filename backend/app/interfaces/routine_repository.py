"""
Standing routine repository interface.

Stores per-weekday standing items and windows.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Mapping, Optional

from app.models.schedule import ResolutionResult, ScheduleItem, Window


class IRoutineRepository(ABC):
    """Abstract interface for standing routine persistence."""

    @abstractmethod
    async def get_items(self, user_id: str, weekday: int) -> list[ScheduleItem]:
        """Get a weekday's standing items sorted by start."""
        pass

    @abstractmethod
    async def get_items_by_weekday(
        self, user_id: str, weekdays: Iterable[int]
    ) -> dict[int, list[ScheduleItem]]:
        """Get standing items for several weekdays; every requested key is present."""
        pass

    @abstractmethod
    async def get_windows(
        self, user_id: str, weekdays: Iterable[int]
    ) -> dict[int, Optional[Window]]:
        """Get windows for several weekdays; None where no window is set."""
        pass

    @abstractmethod
    async def set_window(self, user_id: str, weekdays: Iterable[int], window: Window) -> None:
        """Create or replace the window of each weekday, in one transaction."""
        pass

    @abstractmethod
    async def apply_resolutions(
        self, user_id: str, resolutions: Mapping[int, ResolutionResult]
    ) -> None:
        """
        Persist resolved standing sets for several weekdays in one transaction.

        Removes each result's `removed` items and inserts its `inserted` items.
        """
        pass

    @abstractmethod
    async def clear_weekday(self, user_id: str, weekday: int) -> None:
        """Delete a weekday's standing items and its window."""
        pass
