"""Error taxonomy for fitcore.

Pagination errors split into client input errors (bad cursor, bad limit) and
internal invariant violations (an ill-formed cursor extracted from a row).
Rate limiter infrastructure failures are kept separate from a negative
decision so callers never read "store unavailable" as "request denied".
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(str, Enum):
    """Stable machine-readable error codes returned to API consumers."""

    BAD_REQUEST = "BadRequest"
    UNAUTHORIZED = "Unauthorized"
    NOT_FOUND = "NotFound"
    TOO_MANY_REQUESTS = "TooManyRequests"
    INTERNAL = "InternalError"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"


class PaginationError(Exception):
    """Base class for pagination failures."""


class InvalidCursor(PaginationError):
    """Opaque cursor string could not be decoded."""

    def __init__(self, message: str = "pagination: invalid cursor"):
        super().__init__(message)


class InvalidLimit(PaginationError):
    """Requested page size is zero or negative."""

    def __init__(self, limit: int):
        super().__init__(f"pagination: limit must be greater than zero (got {limit})")
        self.limit = limit


class InvalidCursorValue(PaginationError):
    """Cursor extracted from the last row of a page is incomplete."""

    def __init__(self, message: str = "pagination: cursor value is invalid"):
        super().__init__(message)


class RateLimitStoreError(Exception):
    """Shared bucket store is unreachable or the atomic script failed."""


class DatabaseError(Exception):
    """A data-access query failed or the database is not configured."""


class StorageError(Exception):
    """Object storage could not presign an upload."""


class APIError(Exception):
    """Error carrying the HTTP status and stable code to report to the client."""

    def __init__(
        self,
        status: int,
        code: ErrorCode,
        message: str,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message
        self.headers = headers or {}
