"""Exercise log routes for fitcore."""

import asyncio
from datetime import date, datetime, time, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from fitcore.api.dependencies import get_repositories
from fitcore.api.pagination import PageParams, page_params
from fitcore.core.errors import APIError, ErrorCode
from fitcore.core.pagination import Page, TimeDescCursor
from fitcore.infrastructure.auth import get_current_user
from fitcore.infrastructure.database import Repositories
from fitcore.models import Exercise, ExerciseCreateRequest

router = APIRouter(prefix="/v1/exercises", tags=["Exercises"])

DAY_FORMAT = "%Y-%m-%d"


def parse_day(raw: str) -> date:
    """Parse a YYYY-MM-DD day.

    Raises:
        APIError: 400 if the value is not in that exact format
    """
    # strptime alone would accept "2024-5-1"
    if len(raw) == 10:
        try:
            return datetime.strptime(raw, DAY_FORMAT).date()
        except ValueError:
            pass
    raise APIError(400, ErrorCode.BAD_REQUEST, "day must use YYYY-MM-DD format")


def performed_at(day: date, now: datetime) -> datetime:
    """The given day at the current UTC time of day."""
    now = now.astimezone(timezone.utc)
    return datetime.combine(day, time.min, tzinfo=timezone.utc) + (
        now - datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
    )


def _optional_id(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def validate_exercise_request(req: ExerciseCreateRequest) -> ExerciseCreateRequest:
    """Normalize and validate a new exercise.

    Raises:
        APIError: 400 describing the first invalid field
    """
    day = req.day.strip()
    name = req.name.strip()
    if not day or not name or not req.sets:
        raise APIError(400, ErrorCode.BAD_REQUEST, "day, name, and sets are required")

    parse_day(day)

    for item in req.sets:
        if item.reps <= 0:
            raise APIError(400, ErrorCode.BAD_REQUEST, "reps must be greater than 0")
        if item.weight_kg is not None and item.weight_kg < 0:
            raise APIError(400, ErrorCode.BAD_REQUEST, "weight must be non-negative")
        if item.rpe is not None and not 1 <= item.rpe <= 10:
            raise APIError(400, ErrorCode.BAD_REQUEST, "rpe must be between 1 and 10")

    return req.model_copy(
        update={
            "day": day,
            "name": name,
            "gym_id": _optional_id(req.gym_id),
            "machine_id": _optional_id(req.machine_id),
        }
    )


@router.post("", response_model=Exercise, response_model_exclude_none=True, status_code=201)
async def create_exercise(
    body: ExerciseCreateRequest,
    user_id: str = Depends(get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """Log an exercise and its sets for the caller."""
    req = validate_exercise_request(body)
    when = performed_at(parse_day(req.day), datetime.now(timezone.utc))

    return await asyncio.to_thread(
        repos.exercises.create,
        user_id,
        when,
        req.name,
        req.sets,
        gym_id=req.gym_id,
        machine_id=req.machine_id,
    )


@router.get("", response_model=Page[Exercise], response_model_exclude_none=True)
async def list_exercises(
    day: Optional[str] = Query(None, description="Day to list, YYYY-MM-DD (UTC)"),
    user_id: str = Depends(get_current_user),
    page: PageParams = Depends(page_params(default=20, maximum=50)),
    repos: Repositories = Depends(get_repositories),
):
    """The caller's exercises on one day, newest first."""
    raw_day = (day or "").strip()
    if not raw_day:
        raise APIError(400, ErrorCode.BAD_REQUEST, "day parameter is required")

    parsed = parse_day(raw_day)
    cursor = page.decoded_cursor(TimeDescCursor)

    return await asyncio.to_thread(repos.exercises.list_by_day, user_id, parsed, page.limit, cursor)


@router.get("/{exercise_id}", response_model=Exercise, response_model_exclude_none=True)
async def get_exercise(
    exercise_id: str,
    user_id: str = Depends(get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """One of the caller's exercises with its sets."""
    exercise = await asyncio.to_thread(repos.exercises.get_for_user, exercise_id, user_id)
    if exercise is None:
        raise APIError(404, ErrorCode.NOT_FOUND, "exercise not found")
    return exercise
