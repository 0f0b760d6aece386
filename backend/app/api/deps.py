"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
"""

from datetime import date, datetime
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from app.core.config import get_settings
from app.interfaces.auth_provider import IAuthProvider, User
from app.interfaces.day_repository import IDayRepository
from app.interfaces.routine_repository import IRoutineRepository
from app.services.planner_service import PlannerService


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_routine_repository() -> IRoutineRepository:
    """Get routine repository instance."""
    settings = get_settings()
    if settings.is_gcp:
        raise NotImplementedError("Firestore not implemented yet")
    else:
        from app.infrastructure.local.routine_repository import SqliteRoutineRepository
        return SqliteRoutineRepository()


@lru_cache()
def get_day_repository() -> IDayRepository:
    """Get day repository instance."""
    settings = get_settings()
    if settings.is_gcp:
        raise NotImplementedError("Firestore not implemented yet")
    else:
        from app.infrastructure.local.day_repository import SqliteDayRepository
        return SqliteDayRepository()


@lru_cache()
def get_auth_provider() -> IAuthProvider:
    """Get auth provider instance."""
    settings = get_settings()
    from app.infrastructure.local.mock_auth import MockAuthProvider
    return MockAuthProvider(enabled=settings.AUTH_REQUIRED)


# ===========================================
# Service Dependencies
# ===========================================


@lru_cache()
def get_planner_service() -> PlannerService:
    """
    Get the planner service.

    Cached so every request shares the same per-scope locks.
    """
    return PlannerService(
        routine_repo=get_routine_repository(),
        day_repo=get_day_repository(),
        settings=get_settings(),
    )


def get_now() -> datetime:
    """Server's local wall-clock time."""
    return datetime.now()


def get_today(now: datetime = Depends(get_now)) -> date:
    """Today's date on the server; callers cannot choose it."""
    return now.date()


# ===========================================
# User Authentication
# ===========================================


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get current authenticated user.

    With AUTH_REQUIRED off, every request runs as the development user.
    """
    if not auth_provider.is_enabled():
        return User(id="dev_user", email="dev@example.com", display_name="Developer")

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    return await auth_provider.verify_token(token)


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

Planner = Annotated[PlannerService, Depends(get_planner_service)]
Today = Annotated[date, Depends(get_today)]
Now = Annotated[datetime, Depends(get_now)]
CurrentUser = Annotated[User, Depends(get_current_user)]
