"""Database module for fitcore.

Groups the repositories one app instance works against: Supabase-backed in
production, in-process tables in tests and local runs.
"""

from dataclasses import dataclass
from typing import Any, Optional

from fitcore.config import config
from fitcore.core.logging import logger
from fitcore.infrastructure.database.client import SupabaseClient
from fitcore.infrastructure.database.memory import (
    MemoryCommentRepository,
    MemoryExerciseRepository,
    MemoryGymRepository,
    MemoryMachineRepository,
    MemoryReportRepository,
    MemoryReviewRepository,
    MemorySearchRepository,
    MemoryVideoRepository,
)
from fitcore.infrastructure.database.repositories import (
    BaseRepository,
    CommentRepository,
    ExerciseRepository,
    GymRepository,
    MachineRepository,
    ReportRepository,
    ReviewRepository,
    SearchRepository,
    VideoRepository,
)


@dataclass
class Repositories:
    """Repository set shared through ``app.state.repositories``."""

    gyms: Any
    reviews: Any
    machines: Any
    videos: Any
    comments: Any
    exercises: Any
    search: Any
    reports: Any

    @classmethod
    def supabase(cls, client: Optional[SupabaseClient] = None) -> "Repositories":
        """Repositories querying Supabase through one shared client."""
        client = client or SupabaseClient()
        return cls(
            gyms=GymRepository(client),
            reviews=ReviewRepository(client),
            machines=MachineRepository(client),
            videos=VideoRepository(client),
            comments=CommentRepository(client),
            exercises=ExerciseRepository(client),
            search=SearchRepository(client),
            reports=ReportRepository(client),
        )

    @classmethod
    def in_memory(cls) -> "Repositories":
        """Empty in-process tables with the same query methods."""
        gyms = MemoryGymRepository()
        machines = MemoryMachineRepository()
        return cls(
            gyms=gyms,
            reviews=MemoryReviewRepository(),
            machines=machines,
            videos=MemoryVideoRepository(),
            comments=MemoryCommentRepository(),
            exercises=MemoryExerciseRepository(gyms, machines),
            search=MemorySearchRepository(gyms, machines),
            reports=MemoryReportRepository(),
        )


def build_repositories() -> Repositories:
    """Build the repository set for the configured DATABASE_BACKEND.

    Raises:
        ValueError: Unknown backend name
    """
    backend = config.database_backend()
    if backend == "supabase":
        return Repositories.supabase()
    if backend == "memory":
        logger.warning("database_backend_in_memory", reason="rows are lost on restart")
        return Repositories.in_memory()
    raise ValueError(f"unknown DATABASE_BACKEND {backend!r}, expected supabase or memory")


__all__ = [
    "BaseRepository",
    "CommentRepository",
    "ExerciseRepository",
    "GymRepository",
    "MachineRepository",
    "ReportRepository",
    "Repositories",
    "ReviewRepository",
    "SearchRepository",
    "SupabaseClient",
    "VideoRepository",
    "build_repositories",
]
