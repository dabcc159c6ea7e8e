"""Cursor-based pagination.

Fixed-size pages over keyset-ordered results with opaque continuation cursors.
Three orderings are supported:
- time_desc: created_at DESC, id DESC (feeds, reviews, videos)
- distance_asc: distance ASC, id ASC (nearby gyms)
- score_desc: relevance DESC, id ASC (search)
"""

from fitcore.core.pagination.cursor import (
    Cursor,
    DistanceAscCursor,
    ScoreDescCursor,
    TimeDescCursor,
    decode_cursor,
    encode_cursor,
)
from fitcore.core.pagination.page import (
    DISTANCE_ASC,
    SCORE_DESC,
    TIME_DESC,
    Ordering,
    Page,
    build_page,
    distance_asc_page,
    score_desc_page,
    time_desc_page,
)

__all__ = [
    # Cursor codec
    "Cursor",
    "DistanceAscCursor",
    "ScoreDescCursor",
    "TimeDescCursor",
    "decode_cursor",
    "encode_cursor",
    # Page builder
    "DISTANCE_ASC",
    "SCORE_DESC",
    "TIME_DESC",
    "Ordering",
    "Page",
    "build_page",
    "distance_asc_page",
    "score_desc_page",
    "time_desc_page",
]
