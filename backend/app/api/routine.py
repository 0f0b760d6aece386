"""
Standing routine API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from app.api.deps import CurrentUser, Planner, Today
from app.api.errors import to_http_exception
from app.core.exceptions import DeepCalendarError
from app.models.routine import (
    ConflictPreview,
    RoutineView,
    StandingPushRequest,
    StandingPushResponse,
    WindowUpdate,
)

router = APIRouter()


@router.get("", response_model=RoutineView)
async def get_routine(
    user: CurrentUser,
    planner: Planner,
    weekday: int = Query(..., ge=0, le=6, description="0=Sunday .. 6=Saturday"),
):
    return await planner.get_routine(user.id, weekday)


@router.post("/conflicts", response_model=ConflictPreview)
async def preview_conflicts(
    payload: StandingPushRequest,
    user: CurrentUser,
    planner: Planner,
):
    """Dry run of a standing push: list the overlaps per weekday."""
    try:
        return await planner.preview_standing_conflicts(user.id, payload.blocks)
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc


@router.post("/window", response_model=list[RoutineView])
async def set_window(
    payload: WindowUpdate,
    user: CurrentUser,
    planner: Planner,
    today: Today,
):
    try:
        return await planner.set_window(user.id, payload.days, payload.window, today)
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc


@router.post("/push", response_model=StandingPushResponse)
async def push_standing(
    payload: StandingPushRequest,
    user: CurrentUser,
    planner: Planner,
    today: Today,
):
    """
    Add blocks to the standing routine of each weekday they name.

    Without a strategy, any overlap is refused with 409 and the conflict list.
    """
    try:
        return await planner.push_standing(
            user.id,
            payload.blocks,
            payload.strategy,
            payload.confirm_replace,
            today,
        )
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_weekday(
    user: CurrentUser,
    planner: Planner,
    today: Today,
    weekday: int = Query(..., ge=0, le=6),
):
    try:
        await planner.clear_weekday(user.id, weekday, today)
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc
