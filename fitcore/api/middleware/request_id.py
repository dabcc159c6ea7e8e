"""Request ID middleware for fitcore."""

import time
import uuid

import structlog
from fastapi import Request

from fitcore.core.logging import logger

_MAX_REQUEST_ID_LENGTH = 128


def _incoming_request_id(request: Request) -> str:
    value = request.headers.get("X-Request-ID", "").strip()
    if value and len(value) <= _MAX_REQUEST_ID_LENGTH and value.isprintable():
        return value
    return str(uuid.uuid4())


async def request_id_middleware(request: Request, call_next):
    """Tag each request with an ID, bind it to the log context, echo it back."""
    request_id = _incoming_request_id(request)
    started = time.perf_counter()

    with structlog.contextvars.bound_contextvars(request_id=request_id):
        response = await call_next(request)
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )

    response.headers["X-Request-ID"] = request_id
    return response
