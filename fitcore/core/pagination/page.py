"""Page builder for keyset (cursor) pagination.

Callers fetch ``limit + 1`` rows already sorted in the canonical order for
the endpoint. The extra row only signals that another page exists; it is
trimmed here and the cursor is taken from the last row that is returned.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError, model_serializer, model_validator

from fitcore.core.errors import InvalidCursorValue, InvalidLimit
from fitcore.core.pagination.cursor import (
    Cursor,
    DistanceAscCursor,
    ScoreDescCursor,
    TimeDescCursor,
    encode_cursor,
)

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """Standard paginated response envelope."""

    items: List[T]
    next_cursor: Optional[str] = None
    has_more: bool = False

    @model_validator(mode="after")
    def _cursor_matches_has_more(self) -> "Page[T]":
        if self.has_more != bool(self.next_cursor):
            raise ValueError("has_more must be true exactly when next_cursor is set")
        return self

    @model_serializer(mode="wrap")
    def _omit_empty_cursor(self, handler):
        data = handler(self)
        if not self.next_cursor:
            data.pop("next_cursor", None)
        return data


@dataclass(frozen=True)
class Ordering:
    """Ordering strategy: which cursor kind it produces and when that cursor is usable."""

    name: str
    cursor_type: Type[BaseModel]
    is_valid: Callable[[Any], bool]


def _finite(value: float) -> bool:
    return not (math.isnan(value) or math.isinf(value))


def _time_desc_valid(cursor: TimeDescCursor) -> bool:
    return bool(cursor.id) and cursor.created_at.replace(tzinfo=None) != datetime.min


def _distance_asc_valid(cursor: DistanceAscCursor) -> bool:
    return bool(cursor.id) and _finite(cursor.distance_m)


def _score_desc_valid(cursor: ScoreDescCursor) -> bool:
    return bool(cursor.id) and _finite(cursor.score)


TIME_DESC = Ordering(
    name="time_desc",
    cursor_type=TimeDescCursor,
    is_valid=_time_desc_valid,
)

DISTANCE_ASC = Ordering(
    name="distance_asc",
    cursor_type=DistanceAscCursor,
    is_valid=_distance_asc_valid,
)

SCORE_DESC = Ordering(
    name="score_desc",
    cursor_type=ScoreDescCursor,
    is_valid=_score_desc_valid,
)


def build_page(
    rows: Sequence[T],
    limit: int,
    ordering: Ordering,
    extractor: Callable[[T], Cursor],
) -> Page[T]:
    """Trim an over-fetched result set to ``limit`` rows and attach the next cursor.

    Args:
        rows: Up to ``limit + 1`` rows in the ordering's canonical order
        limit: Page size requested by the caller
        ordering: Strategy describing the cursor kind for this ordering
        extractor: Builds the cursor for a row

    Returns:
        Page with at most ``limit`` items; ``next_cursor`` is set only when
        more rows exist past this page

    Raises:
        InvalidLimit: limit is zero or negative
        InvalidCursorValue: the last row cannot produce a well-formed cursor
    """
    if not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0:
        raise InvalidLimit(limit)

    if not rows:
        return Page[Any](items=[], has_more=False)

    has_more = len(rows) > limit
    retained = list(rows[:limit]) if has_more else list(rows)

    next_cursor = None
    if has_more:
        try:
            cursor = extractor(retained[-1])
        except ValidationError as e:
            raise InvalidCursorValue(f"pagination: {ordering.name} cursor could not be built: {e}") from e

        if not isinstance(cursor, ordering.cursor_type) or not ordering.is_valid(cursor):
            raise InvalidCursorValue(f"pagination: {ordering.name} cursor value is invalid")

        next_cursor = encode_cursor(cursor)

    return Page[Any](items=retained, next_cursor=next_cursor, has_more=has_more)


def time_desc_page(
    rows: Sequence[T], limit: int, extractor: Callable[[T], TimeDescCursor]
) -> Page[T]:
    """Build a page for created_at DESC, id DESC ordered rows."""
    return build_page(rows, limit, TIME_DESC, extractor)


def distance_asc_page(
    rows: Sequence[T], limit: int, extractor: Callable[[T], DistanceAscCursor]
) -> Page[T]:
    """Build a page for distance ASC, id ASC ordered rows."""
    return build_page(rows, limit, DISTANCE_ASC, extractor)


def score_desc_page(
    rows: Sequence[T], limit: int, extractor: Callable[[T], ScoreDescCursor]
) -> Page[T]:
    """Build a page for score DESC, id ASC ordered rows."""
    return build_page(rows, limit, SCORE_DESC, extractor)
