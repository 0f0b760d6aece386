"""
Day API endpoints: open, plan, run and shut down a calendar day.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from app.api.deps import CurrentUser, Now, Planner
from app.api.errors import to_http_exception
from app.core.exceptions import DeepCalendarError
from app.models.day import (
    DayBlockUpdate,
    DayPack,
    DayPlanRequest,
    DayPlanResponse,
    DaySummary,
    ShutdownRequest,
)
from app.utils.datetime_utils import minute_of_day

router = APIRouter()


@router.get("/{day}", response_model=DayPack)
async def get_day(
    day: date,
    user: CurrentUser,
    planner: Planner,
    now: Now,
    autocreate: bool = Query(False, description="Open the day from the standing routine"),
    bypass_window: bool = Query(False, description="Open outside the window grace period"),
):
    try:
        return await planner.open_day(
            user.id,
            day,
            autocreate,
            now_min=minute_of_day(now),
            bypass_window=bypass_window,
        )
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{day}/plan", response_model=DayPlanResponse)
async def plan_day(
    day: date,
    payload: DayPlanRequest,
    user: CurrentUser,
    planner: Planner,
):
    """Add one-off blocks to a single date."""
    try:
        return await planner.plan_single_day(
            user.id,
            day,
            payload.blocks,
            payload.strategy,
            payload.confirm_replace,
        )
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc


@router.patch("/{day}/blocks/{block_id}", response_model=DayPack)
async def update_block(
    day: date,
    block_id: str,
    payload: DayBlockUpdate,
    user: CurrentUser,
    planner: Planner,
):
    try:
        return await planner.update_block(user.id, day, block_id, payload)
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{day}/blocks/{block_id}/start", response_model=DayPack)
async def start_block(
    day: date,
    block_id: str,
    user: CurrentUser,
    planner: Planner,
):
    try:
        return await planner.start_block(user.id, day, block_id)
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{day}/stop", response_model=DayPack)
async def stop_active(
    day: date,
    user: CurrentUser,
    planner: Planner,
):
    try:
        return await planner.stop_active(user.id, day)
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{day}/shutdown", response_model=DayPack)
async def shutdown_day(
    day: date,
    user: CurrentUser,
    planner: Planner,
    now: Now,
    payload: Optional[ShutdownRequest] = None,
    bypass_window: bool = Query(False, description="Shut down outside the window grace period"),
):
    try:
        return await planner.shutdown_day(
            user.id,
            day,
            payload.journal if payload else None,
            now_min=minute_of_day(now),
            bypass_window=bypass_window,
        )
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{day}/summary", response_model=DaySummary)
async def get_summary(
    day: date,
    user: CurrentUser,
    planner: Planner,
):
    try:
        return await planner.summarize_day(user.id, day)
    except DeepCalendarError as exc:
        raise to_http_exception(exc) from exc
