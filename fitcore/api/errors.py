"""Error envelope and exception handlers for fitcore.

Every error leaves the API as ``{"error": {"code": ..., "message": ...}}``.
"""

from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fitcore.core.errors import (
    APIError,
    DatabaseError,
    ErrorCode,
    InvalidCursor,
    InvalidCursorValue,
    InvalidLimit,
    RateLimitStoreError,
    StorageError,
)
from fitcore.core.logging import logger


def error_response(
    status: int, code: ErrorCode, message: str, headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """Build the JSON error envelope."""
    return JSONResponse(
        status_code=status,
        content={"error": {"code": code.value, "message": message}},
        headers=headers,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Render an APIError as-is."""
    return error_response(exc.status, exc.code, exc.message, exc.headers)


async def invalid_cursor_handler(request: Request, exc: InvalidCursor) -> JSONResponse:
    """Malformed cursors are client errors; the cause is never disclosed."""
    return error_response(400, ErrorCode.BAD_REQUEST, "invalid cursor")


async def invalid_limit_handler(request: Request, exc: InvalidLimit) -> JSONResponse:
    """Non-positive page size."""
    return error_response(400, ErrorCode.BAD_REQUEST, "limit must be greater than zero")


async def invalid_cursor_value_handler(request: Request, exc: InvalidCursorValue) -> JSONResponse:
    """A row could not produce a cursor: data or query bug, not the caller's fault."""
    logger.error("pagination_cursor_value_invalid", path=request.url.path, error=str(exc))
    return error_response(500, ErrorCode.INTERNAL, "Internal server error")


async def rate_limit_store_error_handler(request: Request, exc: RateLimitStoreError) -> JSONResponse:
    """Limiter store unavailable: fail closed."""
    logger.error("rate_limit_store_unavailable", path=request.url.path, error=str(exc))
    return error_response(500, ErrorCode.INTERNAL, "rate limit check failed")


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Query failed or the database is unreachable; details stay in the log."""
    logger.error("database_error", path=request.url.path, error=str(exc))
    return error_response(500, ErrorCode.INTERNAL, "Internal server error")


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Presigner failure."""
    logger.error("storage_error", path=request.url.path, error=str(exc))
    return error_response(500, ErrorCode.INTERNAL, "failed to generate upload url")


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body or parameter failed schema validation."""
    errors = exc.errors()
    message = "invalid request"
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        detail = errors[0].get("msg", "invalid value")
        message = f"{location}: {detail}" if location else detail
    return error_response(400, ErrorCode.BAD_REQUEST, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for anything not mapped above."""
    logger.error("unhandled_error", path=request.url.path, error=str(exc), exc_info=exc)
    return error_response(500, ErrorCode.INTERNAL, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error handlers to ``app``."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(InvalidCursor, invalid_cursor_handler)
    app.add_exception_handler(InvalidLimit, invalid_limit_handler)
    app.add_exception_handler(InvalidCursorValue, invalid_cursor_value_handler)
    app.add_exception_handler(RateLimitStoreError, rate_limit_store_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
