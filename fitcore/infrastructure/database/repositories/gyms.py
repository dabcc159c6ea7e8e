"""Gym and review repositories for fitcore."""

from typing import Optional

from fitcore.core.logging import logger
from fitcore.core.pagination import (
    DistanceAscCursor,
    Page,
    TimeDescCursor,
    distance_asc_page,
    time_desc_page,
)
from fitcore.infrastructure.database.repositories.base import BaseRepository
from fitcore.infrastructure.database.repositories.keyset import fetch_size, time_desc_filter
from fitcore.models import Gym, GymReview, NearbyGym


class GymRepository(BaseRepository[Gym]):
    """Repository for gyms table operations."""

    def table_name(self) -> str:
        """Return table name."""
        return "gyms"

    def get(self, gym_id: str) -> Optional[Gym]:
        """Get a gym by ID.

        Args:
            gym_id: Gym ID

        Returns:
            Gym or None if not found
        """
        row = self._get_by_id(gym_id)
        return Gym.model_validate(row) if row else None

    def nearby(
        self,
        lat: float,
        lng: float,
        radius_km: float,
        limit: int,
        cursor: Optional[DistanceAscCursor] = None,
    ) -> Page[NearbyGym]:
        """Gyms within ``radius_km`` ordered by distance ASC, id ASC.

        Distance, the keyset predicate and the per-gym aggregates are
        computed by the ``gyms_nearby`` SQL function.

        Args:
            lat: Query latitude
            lng: Query longitude
            radius_km: Search radius in kilometres
            limit: Page size
            cursor: Position after which to resume, if any

        Returns:
            Page of nearby gyms
        """
        size = fetch_size(limit)

        params = {
            "p_lat": lat,
            "p_lng": lng,
            "p_radius_m": radius_km * 1000,
            "p_after_distance": cursor.distance_m if cursor else None,
            "p_after_id": cursor.id if cursor else None,
            "p_limit": size,
        }
        rows = self._execute("nearby", self.db.rpc("gyms_nearby", params))

        logger.debug("gyms_nearby_query", lat=lat, lng=lng, radius_km=radius_km, matched=len(rows))
        return distance_asc_page(
            [NearbyGym.model_validate(row) for row in rows],
            limit,
            lambda row: DistanceAscCursor(distance_m=row.distance_m, id=row.id),
        )


class ReviewRepository(BaseRepository[GymReview]):
    """Repository for gym_reviews table operations."""

    def table_name(self) -> str:
        """Return table name."""
        return "gym_reviews"

    def list_for_gym(
        self, gym_id: str, limit: int, cursor: Optional[TimeDescCursor] = None
    ) -> Page[GymReview]:
        """Reviews of a gym, newest first (created_at DESC, id DESC)."""
        size = fetch_size(limit)

        query = self.db.table(self.table_name()).select("*").eq("gym_id", gym_id)
        if cursor is not None:
            query = query.or_(time_desc_filter(cursor))
        query = query.order("created_at", desc=True).order("id", desc=True).limit(size)

        rows = self._execute("list_for_gym", query)
        return time_desc_page(
            [GymReview.model_validate(row) for row in rows],
            limit,
            lambda review: TimeDescCursor(created_at=review.created_at, id=review.id),
        )
