"""Search models for fitcore."""

from enum import Enum

from pydantic import BaseModel, Field


class SearchKind(str, Enum):
    """Searchable entity kinds."""

    GYM = "gym"
    MACHINE = "machine"


class SearchHit(BaseModel):
    """Single ranked search result."""

    id: str
    kind: SearchKind
    name: str
    score: float = Field(..., description="Relevance in [0, 1], higher is better")
