"""In-process repositories for tests and local runs without Supabase.

Each class answers the same calls as its Supabase counterpart. Rows live in
a dict keyed by id; list queries are keyset scans over a snapshot, using the
predicates from ``keyset`` so paging behaves as the SQL queries do.
"""

import math
import threading
import uuid
from datetime import date, datetime, time, timedelta, timezone
from difflib import SequenceMatcher
from typing import Dict, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel

from fitcore.core.logging import logger
from fitcore.core.pagination import (
    DistanceAscCursor,
    Page,
    ScoreDescCursor,
    TimeDescCursor,
    distance_asc_page,
    score_desc_page,
    time_desc_page,
)
from fitcore.infrastructure.database.repositories.keyset import (
    after_distance_asc,
    after_score_desc,
    after_time_desc,
    as_utc,
    fetch_size,
)
from fitcore.infrastructure.database.repositories.search import SIMILARITY_THRESHOLD
from fitcore.models import (
    Exercise,
    ExerciseSet,
    ExerciseSetInput,
    Gym,
    GymReview,
    InstructionVideo,
    Machine,
    NearbyGym,
    Report,
    SearchHit,
    SearchKind,
    VideoComment,
)

T = TypeVar("T", bound=BaseModel)

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in metres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))


def relevance_score(query: str, name: str, prefix: bool = False) -> float:
    """Score ``name`` against ``query`` in [0, 1].

    Stands in for ``pg_trgm`` similarity. Prefix mode only matches names where
    the whole name or one of its words starts with the query. Substring
    matches score at least 0.5.
    """
    q = query.strip().lower()
    n = name.strip().lower()
    if not q or not n:
        return 0.0

    if prefix and not (n.startswith(q) or any(word.startswith(q) for word in n.split())):
        return 0.0

    score = SequenceMatcher(None, q, n).ratio()
    if q in n:
        score = max(score, 0.5)
    return round(score, 6)


class MemoryTable(Generic[T]):
    """Rows of one table keyed by id."""

    def __init__(self):
        self._rows: Dict[str, T] = {}
        self._lock = threading.RLock()

    def add(self, row: T) -> T:
        """Insert or replace a row by id."""
        with self._lock:
            self._rows[row.id] = row
        return row

    def get(self, row_id: str) -> Optional[T]:
        """Get a row by id."""
        with self._lock:
            return self._rows.get(row_id)

    def all(self) -> List[T]:
        """Snapshot of every row."""
        with self._lock:
            return list(self._rows.values())

    def count(self) -> int:
        with self._lock:
            return len(self._rows)


class MemoryGymRepository(MemoryTable[Gym]):
    def nearby(
        self,
        lat: float,
        lng: float,
        radius_km: float,
        limit: int,
        cursor: Optional[DistanceAscCursor] = None,
    ) -> Page[NearbyGym]:
        """Gyms within ``radius_km`` ordered by distance ASC, id ASC."""
        size = fetch_size(limit)
        radius_m = radius_km * 1000

        rows: List[NearbyGym] = []
        for gym in self.all():
            distance_m = haversine_m(lat, lng, gym.lat, gym.lng)
            if distance_m > radius_m:
                continue
            if not after_distance_asc(cursor, distance_m, gym.id):
                continue
            rows.append(
                NearbyGym(
                    id=gym.id,
                    name=gym.name,
                    lat=gym.lat,
                    lng=gym.lng,
                    address=gym.address,
                    distance_m=distance_m,
                    avg_rating=gym.avg_rating,
                    machines_count=gym.machines_count,
                    price_from_cents=gym.price_from_cents,
                )
            )

        rows.sort(key=lambda row: (row.distance_m, row.id))

        return distance_asc_page(
            rows[:size],
            limit,
            lambda row: DistanceAscCursor(distance_m=row.distance_m, id=row.id),
        )


class MemoryReviewRepository(MemoryTable[GymReview]):
    def list_for_gym(
        self, gym_id: str, limit: int, cursor: Optional[TimeDescCursor] = None
    ) -> Page[GymReview]:
        """Reviews of a gym, newest first."""
        size = fetch_size(limit)

        rows = [
            review
            for review in self.all()
            if review.gym_id == gym_id and after_time_desc(cursor, review.created_at, review.id)
        ]
        rows.sort(key=lambda review: (as_utc(review.created_at), review.id), reverse=True)

        return time_desc_page(
            rows[:size],
            limit,
            lambda review: TimeDescCursor(created_at=review.created_at, id=review.id),
        )


class MemoryMachineRepository(MemoryTable[Machine]):
    pass


class MemoryVideoRepository(MemoryTable[InstructionVideo]):
    def list_by_machine(
        self, machine_id: str, limit: int, cursor: Optional[TimeDescCursor] = None
    ) -> Page[InstructionVideo]:
        """Videos for a machine, newest first."""
        size = fetch_size(limit)

        rows = [
            video
            for video in self.all()
            if video.machine_id == machine_id
            and after_time_desc(cursor, video.created_at, video.id)
        ]
        rows.sort(key=lambda video: (as_utc(video.created_at), video.id), reverse=True)

        return time_desc_page(
            rows[:size],
            limit,
            lambda video: TimeDescCursor(created_at=video.created_at, id=video.id),
        )


class MemoryCommentRepository(MemoryTable[VideoComment]):
    def create(self, video_id: str, user_id: str, text: str) -> VideoComment:
        comment = VideoComment(
            id=str(uuid.uuid4()),
            video_id=video_id,
            user_id=user_id,
            text=text,
            created_at=datetime.now(timezone.utc),
        )
        return self.add(comment)

    def list_by_video(
        self, video_id: str, limit: int, cursor: Optional[TimeDescCursor] = None
    ) -> Page[VideoComment]:
        """Comments on a video, newest first."""
        size = fetch_size(limit)

        rows = [
            comment
            for comment in self.all()
            if comment.video_id == video_id
            and after_time_desc(cursor, comment.created_at, comment.id)
        ]
        rows.sort(key=lambda comment: (as_utc(comment.created_at), comment.id), reverse=True)

        return time_desc_page(
            rows[:size],
            limit,
            lambda comment: TimeDescCursor(created_at=comment.created_at, id=comment.id),
        )


class MemoryExerciseRepository(MemoryTable[Exercise]):
    def __init__(self, gyms: MemoryGymRepository, machines: MemoryMachineRepository):
        super().__init__()
        self._gyms = gyms
        self._machines = machines

    def _with_names(self, exercise: Exercise) -> Exercise:
        gym = self._gyms.get(exercise.gym_id) if exercise.gym_id else None
        machine = self._machines.get(exercise.machine_id) if exercise.machine_id else None
        return exercise.model_copy(
            update={
                "gym_name": gym.name if gym else None,
                "machine_name": machine.name if machine else None,
            }
        )

    def create(
        self,
        user_id: str,
        performed_at: datetime,
        name: str,
        sets: Sequence[ExerciseSetInput],
        gym_id: Optional[str] = None,
        machine_id: Optional[str] = None,
    ) -> Exercise:
        exercise_id = str(uuid.uuid4())
        exercise = Exercise(
            id=exercise_id,
            user_id=user_id,
            gym_id=gym_id,
            machine_id=machine_id,
            name=name,
            created_at=as_utc(performed_at),
            sets=[
                ExerciseSet(
                    id=str(uuid.uuid4()),
                    exercise_id=exercise_id,
                    set_index=index,
                    **item.model_dump(),
                )
                for index, item in enumerate(sets, start=1)
            ],
        )
        return self.add(exercise)

    def list_by_day(
        self, user_id: str, day: date, limit: int, cursor: Optional[TimeDescCursor] = None
    ) -> Page[Exercise]:
        """A user's exercises performed on ``day`` (UTC), newest first."""
        size = fetch_size(limit)
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)

        rows = [
            exercise
            for exercise in self.all()
            if exercise.user_id == user_id
            and start <= as_utc(exercise.created_at) < end
            and after_time_desc(cursor, exercise.created_at, exercise.id)
        ]
        rows.sort(key=lambda exercise: (as_utc(exercise.created_at), exercise.id), reverse=True)

        return time_desc_page(
            [self._with_names(exercise) for exercise in rows[:size]],
            limit,
            lambda exercise: TimeDescCursor(created_at=exercise.created_at, id=exercise.id),
        )

    def get_for_user(self, exercise_id: str, user_id: str) -> Optional[Exercise]:
        exercise = self.get(exercise_id)
        if exercise is None or exercise.user_id != user_id:
            return None
        return self._with_names(exercise)


class MemorySearchRepository:
    """Ranks gyms or machines by relevance (score DESC, id ASC)."""

    def __init__(self, gyms: MemoryGymRepository, machines: MemoryMachineRepository):
        self._gyms = gyms
        self._machines = machines

    def _candidates(self, kind: SearchKind) -> Iterable[Tuple[str, str]]:
        if kind == SearchKind.GYM:
            return ((gym.id, gym.name) for gym in self._gyms.all())
        return ((machine.id, machine.name) for machine in self._machines.all())

    def search(
        self,
        query: str,
        kind: SearchKind,
        limit: int,
        cursor: Optional[ScoreDescCursor] = None,
        prefix: bool = False,
    ) -> Page[SearchHit]:
        size = fetch_size(limit)

        hits: List[SearchHit] = []
        for row_id, name in self._candidates(kind):
            score = relevance_score(query, name, prefix)
            if score <= 0 or (not prefix and score < SIMILARITY_THRESHOLD):
                continue
            if not after_score_desc(cursor, score, row_id):
                continue
            hits.append(SearchHit(id=row_id, kind=kind, name=name, score=score))

        hits.sort(key=lambda hit: (-hit.score, hit.id))

        return score_desc_page(
            hits[:size],
            limit,
            lambda hit: ScoreDescCursor(score=hit.score, id=hit.id),
        )


class MemoryReportRepository(MemoryTable[Report]):
    def create(self, reporter_id: str, object_type: str, object_id: str, reason: str) -> Report:
        report = Report(
            id=str(uuid.uuid4()),
            reporter_id=reporter_id,
            object_type=object_type,
            object_id=object_id,
            reason=reason,
            created_at=datetime.now(timezone.utc),
        )
        logger.info("report_created", report_id=report.id, reporter_id=reporter_id, backend="memory")
        return self.add(report)
