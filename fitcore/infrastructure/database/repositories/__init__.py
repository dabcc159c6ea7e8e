"""Repository implementations for fitcore.

Implements Repository pattern with Dependency Inversion principle.
"""

from fitcore.infrastructure.database.repositories.base import BaseRepository
from fitcore.infrastructure.database.repositories.exercises import ExerciseRepository
from fitcore.infrastructure.database.repositories.gyms import GymRepository, ReviewRepository
from fitcore.infrastructure.database.repositories.reports import ReportRepository
from fitcore.infrastructure.database.repositories.search import SearchRepository
from fitcore.infrastructure.database.repositories.videos import (
    CommentRepository,
    MachineRepository,
    VideoRepository,
)

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "ExerciseRepository",
    "GymRepository",
    "MachineRepository",
    "ReportRepository",
    "ReviewRepository",
    "SearchRepository",
    "VideoRepository",
]
