"""Exercise log repository for fitcore."""

import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Optional, Sequence

from fitcore.core.logging import logger
from fitcore.core.pagination import Page, TimeDescCursor, time_desc_page
from fitcore.infrastructure.database.repositories.base import BaseRepository
from fitcore.infrastructure.database.repositories.keyset import (
    as_utc,
    fetch_size,
    time_desc_filter,
)
from fitcore.models import Exercise, ExerciseSet, ExerciseSetInput

# Exercise columns plus display names and sets, embedded through foreign keys
EXERCISE_SELECT = "*, gyms(name), machines(name), exercise_sets(*)"


def exercise_from_row(row: Dict[str, Any]) -> Exercise:
    """Flatten a PostgREST exercise row with embedded relations."""
    data = dict(row)
    gym = data.pop("gyms", None) or {}
    machine = data.pop("machines", None) or {}
    sets = sorted(data.pop("exercise_sets", None) or [], key=lambda item: item["set_index"])
    return Exercise.model_validate(
        {**data, "sets": sets, "gym_name": gym.get("name"), "machine_name": machine.get("name")}
    )


class ExerciseRepository(BaseRepository[Exercise]):
    """Repository for exercises and exercise_sets table operations."""

    def table_name(self) -> str:
        """Return table name."""
        return "exercises"

    def create(
        self,
        user_id: str,
        performed_at: datetime,
        name: str,
        sets: Sequence[ExerciseSetInput],
        gym_id: Optional[str] = None,
        machine_id: Optional[str] = None,
    ) -> Exercise:
        """Store an exercise and its sets in one transaction.

        Sets are numbered from 1 in the order given. The ``create_exercise``
        SQL function inserts the exercise and its sets atomically.

        Args:
            user_id: Owner
            performed_at: When the exercise was performed
            name: Exercise name
            sets: Validated sets
            gym_id: Gym it was performed at, if any
            machine_id: Machine used, if any

        Returns:
            The stored exercise
        """
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

        params = {
            "p_exercise": exercise.model_dump(
                mode="json", include={"id", "user_id", "gym_id", "machine_id", "name", "created_at"}
            ),
            "p_sets": [item.model_dump(mode="json") for item in exercise.sets],
        }
        self._execute("create", self.db.rpc("create_exercise", params))

        logger.info(
            "exercise_created",
            exercise_id=exercise.id,
            user_id=user_id,
            sets=len(exercise.sets),
        )
        return exercise

    def list_by_day(
        self, user_id: str, day: date, limit: int, cursor: Optional[TimeDescCursor] = None
    ) -> Page[Exercise]:
        """A user's exercises performed on ``day`` (UTC), newest first."""
        size = fetch_size(limit)
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)

        query = (
            self.db.table(self.table_name())
            .select(EXERCISE_SELECT)
            .eq("user_id", user_id)
            .gte("created_at", start.isoformat())
            .lt("created_at", end.isoformat())
        )
        if cursor is not None:
            query = query.or_(time_desc_filter(cursor))
        query = query.order("created_at", desc=True).order("id", desc=True).limit(size)

        rows = self._execute("list_by_day", query)
        return time_desc_page(
            [exercise_from_row(row) for row in rows],
            limit,
            lambda exercise: TimeDescCursor(created_at=exercise.created_at, id=exercise.id),
        )

    def get_for_user(self, exercise_id: str, user_id: str) -> Optional[Exercise]:
        """Get one of a user's exercises with its sets, or None."""
        query = (
            self.db.table(self.table_name())
            .select(EXERCISE_SELECT)
            .eq("id", exercise_id)
            .eq("user_id", user_id)
            .limit(1)
        )
        rows = self._execute("get_for_user", query)
        return exercise_from_row(rows[0]) if rows else None
