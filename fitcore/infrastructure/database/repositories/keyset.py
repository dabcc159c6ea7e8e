"""Keyset predicates matching the three cursor orderings.

Each predicate answers "does this row come strictly after the cursor?" in
the ordering the cursor belongs to. The ``after_*`` functions evaluate it in
process; ``time_desc_filter`` renders the same predicate for PostgREST, e.g.
``created_at < :ts OR (created_at = :ts AND id < :id)``.
"""

from datetime import datetime, timezone
from typing import Optional

from fitcore.core.errors import InvalidLimit
from fitcore.core.pagination import DistanceAscCursor, ScoreDescCursor, TimeDescCursor


def fetch_size(limit: int) -> int:
    """Rows to fetch for a page of ``limit``: one extra to detect more."""
    if limit <= 0:
        raise InvalidLimit(limit)
    return limit + 1


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with cursor timestamps."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def after_time_desc(cursor: Optional[TimeDescCursor], created_at: datetime, row_id: str) -> bool:
    """created_at DESC, id DESC."""
    if cursor is None:
        return True
    created_at = as_utc(created_at)
    return created_at < cursor.created_at or (
        created_at == cursor.created_at and row_id < cursor.id
    )


def after_distance_asc(cursor: Optional[DistanceAscCursor], distance_m: float, row_id: str) -> bool:
    """distance ASC, id ASC."""
    if cursor is None:
        return True
    return distance_m > cursor.distance_m or (
        distance_m == cursor.distance_m and row_id > cursor.id
    )


def after_score_desc(cursor: Optional[ScoreDescCursor], score: float, row_id: str) -> bool:
    """score DESC, id ASC."""
    if cursor is None:
        return True
    return score < cursor.score or (score == cursor.score and row_id > cursor.id)


def _quote(value: str) -> str:
    """Quote a PostgREST filter value so commas, dots and parens are literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def time_desc_filter(cursor: TimeDescCursor, column: str = "created_at") -> str:
    """PostgREST ``or`` filter selecting rows strictly after ``cursor``.

    Renders ``column < ts OR (column = ts AND id < :id)`` for use with
    ``.or_(...)``; pair it with ``ORDER BY column DESC, id DESC``.
    """
    ts = _quote(as_utc(cursor.created_at).isoformat())
    row_id = _quote(cursor.id)
    return f"{column}.lt.{ts},and({column}.eq.{ts},id.lt.{row_id})"
