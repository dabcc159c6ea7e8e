"""Query-string handling for paginated endpoints.

Range clamping of ``limit`` belongs here, not in the page builder: absent
means the endpoint default, values above the endpoint cap are clamped, and
anything that is not a positive integer is rejected.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Type

from fastapi import Query

from fitcore.core.errors import APIError, ErrorCode
from fitcore.core.pagination import decode_cursor
from fitcore.core.pagination.cursor import C


@dataclass(frozen=True)
class PageParams:
    """Validated page size plus the raw opaque cursor."""

    limit: int
    cursor: Optional[str] = None

    def decoded_cursor(self, cursor_type: Type[C]) -> Optional[C]:
        """Decode the cursor, if one was sent.

        Raises:
            InvalidCursor: cursor present but malformed
        """
        if self.cursor is None:
            return None
        return decode_cursor(self.cursor, cursor_type)


def parse_limit(raw: Optional[str], default: int, maximum: int) -> int:
    """Parse and clamp a ``limit`` query value."""
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise APIError(400, ErrorCode.BAD_REQUEST, "limit must be a positive integer")
    if value <= 0:
        raise APIError(400, ErrorCode.BAD_REQUEST, "limit must be a positive integer")
    return min(value, maximum)


def page_params(default: int = 20, maximum: int = 50) -> Callable[..., PageParams]:
    """Build a FastAPI dependency reading ``limit`` and ``cursor``.

    Usage:
        @router.get("/items")
        async def list_items(page: PageParams = Depends(page_params(20, 50))):
            ...
    """

    def dependency(
        limit: Optional[str] = Query(None, description=f"Page size (default {default}, max {maximum})"),
        cursor: Optional[str] = Query(None, description="Opaque cursor from the previous page"),
    ) -> PageParams:
        raw_cursor = cursor.strip() if cursor is not None else None
        return PageParams(limit=parse_limit(limit, default, maximum), cursor=raw_cursor or None)

    return dependency
