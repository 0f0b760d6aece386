"""Abstract interfaces for infrastructure abstraction."""

from app.interfaces.auth_provider import IAuthProvider
from app.interfaces.day_repository import IDayRepository
from app.interfaces.routine_repository import IRoutineRepository

__all__ = [
    "IAuthProvider",
    "IDayRepository",
    "IRoutineRepository",
]
