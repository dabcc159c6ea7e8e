"""Opaque cursor codec.

A cursor carries the sort-key values of the last row of a page plus the row
id as tie-break. It is serialized as JSON and wrapped in standard, padded
base64 so it can travel as a query-string value.
"""

import base64
import binascii
from datetime import datetime, timezone
from typing import Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from fitcore.core.errors import InvalidCursor


class _CursorModel(BaseModel):
    # numbers must be JSON numbers and timestamps ISO strings; NaN and Infinity are rejected
    model_config = ConfigDict(frozen=True, extra="ignore", strict=True, allow_inf_nan=False)


class TimeDescCursor(_CursorModel):
    """Position in a created_at DESC, id DESC ordering."""

    created_at: datetime
    id: str

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        try:
            return value.astimezone(timezone.utc)
        except OverflowError:
            # only reachable for the zero timestamp, which pages reject anyway
            return value.replace(tzinfo=timezone.utc)


class DistanceAscCursor(_CursorModel):
    """Position in a distance ASC, id ASC ordering."""

    distance_m: float
    id: str


class ScoreDescCursor(_CursorModel):
    """Position in a relevance score DESC, id ASC ordering."""

    score: float
    id: str


Cursor = Union[TimeDescCursor, DistanceAscCursor, ScoreDescCursor]

C = TypeVar("C", TimeDescCursor, DistanceAscCursor, ScoreDescCursor)


def encode_cursor(cursor: Cursor) -> str:
    """Serialize a cursor to an opaque base64 string."""
    payload = cursor.model_dump_json().encode("utf-8")
    return base64.b64encode(payload).decode("ascii")


def decode_cursor(raw: str, cursor_type: Type[C]) -> C:
    """Decode an opaque cursor string into ``cursor_type``.

    Raises:
        InvalidCursor: for any malformed input; callers report it as a
            plain bad request without distinguishing the cause.
    """
    trimmed = (raw or "").strip()
    if not trimmed:
        raise InvalidCursor()

    try:
        payload = base64.b64decode(trimmed, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidCursor() from e

    if not payload:
        raise InvalidCursor()

    try:
        return cursor_type.model_validate_json(payload)
    except ValidationError as e:
        raise InvalidCursor() from e
