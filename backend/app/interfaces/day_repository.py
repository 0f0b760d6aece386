"""
Day repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from app.models.day import DayPack
from app.models.schedule import ResolutionResult


class IDayRepository(ABC):
    """Abstract interface for day and day block persistence."""

    @abstractmethod
    async def get(self, user_id: str, day: date) -> Optional[DayPack]:
        pass

    @abstractmethod
    async def create(self, pack: DayPack) -> DayPack:
        """
        Store a new day with its blocks.

        Raises:
            DuplicateError: If the user already has a day for that date
        """
        pass

    @abstractmethod
    async def save(self, pack: DayPack) -> DayPack:
        """Update day timestamps/journal and the mutable fields of its blocks."""
        pass

    @abstractmethod
    async def apply_resolution(
        self, user_id: str, day: date, resolution: ResolutionResult
    ) -> DayPack:
        """
        Persist a resolved day set in one transaction, creating the day if missing.

        Removes the result's `removed` blocks and inserts its `inserted` items
        as planned blocks.
        """
        pass
