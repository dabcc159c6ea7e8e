"""Abuse report routes for fitcore."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends

from fitcore.api.dependencies import get_report_limiter, get_repositories
from fitcore.core.errors import APIError, ErrorCode
from fitcore.infrastructure.auth import get_current_user
from fitcore.infrastructure.database import Repositories
from fitcore.infrastructure.rate_limit import Limiter, enforce_rate_limit
from fitcore.models import REPORTABLE_OBJECT_TYPES, Report, ReportCreateRequest

router = APIRouter(prefix="/v1", tags=["Moderation"])


@router.post("/reports", response_model=Report, status_code=201)
async def create_report(
    body: ReportCreateRequest,
    user_id: str = Depends(get_current_user),
    limiter: Optional[Limiter] = Depends(get_report_limiter),
    repos: Repositories = Depends(get_repositories),
):
    """Flag a review or video for moderation. Limited per user."""
    await enforce_rate_limit(limiter, user_id, message="report rate limit exceeded")

    object_type = body.object_type.strip().lower()
    object_id = body.object_id.strip()
    reason = body.reason.strip()

    if object_type not in REPORTABLE_OBJECT_TYPES:
        raise APIError(400, ErrorCode.BAD_REQUEST, "object_type must be review or video")
    if not object_id or not reason:
        raise APIError(400, ErrorCode.BAD_REQUEST, "object_id and reason are required")

    return await asyncio.to_thread(repos.reports.create, user_id, object_type, object_id, reason)
