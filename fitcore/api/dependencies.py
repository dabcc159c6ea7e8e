"""FastAPI dependencies for fitcore.

Dependency injection functions for route handlers. Collaborators are set on
``app.state`` by the app factory and can be swapped in tests.
"""

from typing import Optional

from fastapi import Request

from fitcore.core.errors import APIError, ErrorCode
from fitcore.infrastructure.database import Repositories
from fitcore.infrastructure.rate_limit import Limiter
from fitcore.infrastructure.storage import ObjectStorage


def get_repositories(request: Request) -> Repositories:
    """Get the repository set from app state."""
    return request.app.state.repositories


def get_upload_limiter(request: Request) -> Optional[Limiter]:
    """Get the limiter guarding upload URL issuance (None disables it)."""
    return getattr(request.app.state, "upload_limiter", None)


def get_report_limiter(request: Request) -> Optional[Limiter]:
    """Get the limiter guarding abuse reports (None disables it)."""
    return getattr(request.app.state, "report_limiter", None)


def get_object_storage(request: Request) -> ObjectStorage:
    """Get the object storage presigner.

    Raises:
        APIError: 503 if no storage provider is configured
    """
    storage = getattr(request.app.state, "object_storage", None)
    if storage is None:
        raise APIError(503, ErrorCode.SERVICE_UNAVAILABLE, "storage service is not available")
    return storage
