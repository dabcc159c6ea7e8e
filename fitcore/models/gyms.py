"""Gym models for fitcore."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Gym(BaseModel):
    """Gym location as stored."""

    id: str
    name: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str = ""
    avg_rating: Optional[float] = None
    machines_count: int = 0
    price_from_cents: Optional[int] = None
    created_at: datetime


class NearbyGym(BaseModel):
    """Minimal payload for the nearby gyms feed."""

    id: str
    name: str
    lat: float
    lng: float
    address: str
    distance_m: float = Field(..., description="Great-circle distance from the query point in metres")
    avg_rating: Optional[float] = None
    machines_count: int = 0
    price_from_cents: Optional[int] = None


class GymReview(BaseModel):
    """User review for a gym."""

    id: str
    gym_id: str
    user_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    created_at: datetime
