"""Gym routes for fitcore: nearby feed and reviews."""

import asyncio
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query

from fitcore.api.dependencies import get_repositories
from fitcore.api.pagination import PageParams, page_params
from fitcore.core.errors import APIError, ErrorCode
from fitcore.core.pagination import DistanceAscCursor, Page, TimeDescCursor
from fitcore.infrastructure.database import Repositories
from fitcore.models import GymReview, NearbyGym

router = APIRouter(prefix="/v1/gyms", tags=["Gyms"])

DEFAULT_RADIUS_KM = 5.0
MAX_RADIUS_KM = 50.0


def _parse_coordinate(raw: str, name: str, bound: float) -> float:
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value) or value < -bound or value > bound:
        raise APIError(
            400,
            ErrorCode.BAD_REQUEST,
            f"{name} must be a valid coordinate between -{bound:g} and {bound:g}",
        )
    return value


def _parse_radius(raw: Optional[str]) -> float:
    if raw is None or raw.strip() == "":
        return DEFAULT_RADIUS_KM
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value) or value <= 0:
        raise APIError(400, ErrorCode.BAD_REQUEST, "radius_km must be a positive number")
    return min(value, MAX_RADIUS_KM)


@router.get("/nearby", response_model=Page[NearbyGym], response_model_exclude_none=True)
async def get_nearby_gyms(
    lat: Optional[str] = Query(None, description="Latitude of the query point"),
    lng: Optional[str] = Query(None, description="Longitude of the query point"),
    radius_km: Optional[str] = Query(None, description="Search radius (default 5, max 50)"),
    page: PageParams = Depends(page_params(default=20, maximum=50)),
    repos: Repositories = Depends(get_repositories),
):
    """Gyms ordered by distance from (lat, lng), nearest first."""
    if not lat or not lng:
        raise APIError(400, ErrorCode.BAD_REQUEST, "lat and lng parameters are required")

    lat_value = _parse_coordinate(lat, "lat", 90)
    lng_value = _parse_coordinate(lng, "lng", 180)
    radius = _parse_radius(radius_km)
    cursor = page.decoded_cursor(DistanceAscCursor)

    return await asyncio.to_thread(
        repos.gyms.nearby, lat_value, lng_value, radius, page.limit, cursor
    )


@router.get("/{gym_id}/reviews", response_model=Page[GymReview], response_model_exclude_none=True)
async def get_gym_reviews(
    gym_id: str,
    page: PageParams = Depends(page_params(default=20, maximum=50)),
    repos: Repositories = Depends(get_repositories),
):
    """Reviews of a gym, newest first."""
    cursor = page.decoded_cursor(TimeDescCursor)

    if await asyncio.to_thread(repos.gyms.get, gym_id) is None:
        raise APIError(404, ErrorCode.NOT_FOUND, "gym not found")

    return await asyncio.to_thread(repos.reviews.list_for_gym, gym_id, page.limit, cursor)
