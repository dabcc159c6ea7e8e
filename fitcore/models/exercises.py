"""Exercise log models for fitcore."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ExerciseSetInput(BaseModel):
    """One set as submitted by the client."""

    reps: int = 0
    weight_kg: Optional[float] = None
    rpe: Optional[float] = Field(None, description="Rate of perceived exertion, 1 to 10")
    notes: Optional[str] = None


class ExerciseCreateRequest(BaseModel):
    """Request to log an exercise with its sets."""

    day: str = Field("", description="Day performed, YYYY-MM-DD")
    gym_id: Optional[str] = None
    machine_id: Optional[str] = None
    name: str = ""
    sets: List[ExerciseSetInput] = Field(default_factory=list)


class ExerciseSet(BaseModel):
    """Stored set, numbered from 1 within its exercise."""

    id: str
    exercise_id: str
    set_index: int
    reps: int
    weight_kg: Optional[float] = None
    rpe: Optional[float] = None
    notes: Optional[str] = None


class Exercise(BaseModel):
    """Logged exercise with its sets and display names."""

    id: str
    user_id: str
    gym_id: Optional[str] = None
    machine_id: Optional[str] = None
    name: str
    created_at: datetime
    sets: List[ExerciseSet] = Field(default_factory=list)
    gym_name: Optional[str] = None
    machine_name: Optional[str] = None
