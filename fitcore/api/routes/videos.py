"""Instruction video and video comment routes for fitcore."""

import asyncio
import uuid
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query

from fitcore.api.dependencies import get_object_storage, get_repositories, get_upload_limiter
from fitcore.api.pagination import PageParams, page_params
from fitcore.config import config
from fitcore.core.errors import APIError, ErrorCode
from fitcore.core.logging import logger
from fitcore.core.pagination import Page, TimeDescCursor
from fitcore.infrastructure.auth import get_current_user
from fitcore.infrastructure.database import Repositories
from fitcore.infrastructure.rate_limit import Limiter, enforce_rate_limit
from fitcore.infrastructure.storage import ObjectStorage
from fitcore.models import (
    ALLOWED_VIDEO_CONTENT_TYPES,
    MAX_COMMENT_LENGTH,
    CommentCreateRequest,
    InstructionVideo,
    UploadURLRequest,
    UploadURLResponse,
    VideoComment,
)

router = APIRouter(prefix="/v1/videos", tags=["Videos"])

UPLOAD_URL_TTL = timedelta(minutes=15)
THUMBNAIL_CONTENT_TYPE = "image/jpeg"


def validate_upload_request(req: UploadURLRequest) -> UploadURLRequest:
    """Normalize and validate an upload URL request.

    Raises:
        APIError: 400 describing the first invalid field
    """
    machine_id = req.machine_id.strip()
    if not machine_id:
        raise APIError(400, ErrorCode.BAD_REQUEST, "machine_id is required")

    title = req.title.strip()
    if not title:
        raise APIError(400, ErrorCode.BAD_REQUEST, "title is required")

    content_type = req.content_type.strip()
    if not content_type:
        raise APIError(400, ErrorCode.BAD_REQUEST, "content_type is required")
    if content_type not in ALLOWED_VIDEO_CONTENT_TYPES:
        raise APIError(400, ErrorCode.BAD_REQUEST, "unsupported content_type")

    if req.bytes <= 0:
        raise APIError(400, ErrorCode.BAD_REQUEST, "bytes must be greater than zero")

    max_mb = config.max_upload_mb()
    if max_mb > 0 and req.bytes > max_mb * 1024 * 1024:
        raise APIError(400, ErrorCode.BAD_REQUEST, f"file size exceeds limit of {max_mb}MB")

    return req.model_copy(
        update={
            "machine_id": machine_id,
            "title": title,
            "description": req.description.strip(),
            "content_type": content_type,
        }
    )


@router.get("", response_model=Page[InstructionVideo], response_model_exclude_none=True)
async def list_videos(
    machine_id: Optional[str] = Query(None, description="Machine to list videos for"),
    page: PageParams = Depends(page_params(default=20, maximum=50)),
    repos: Repositories = Depends(get_repositories),
):
    """Instruction videos for a machine, newest first."""
    machine_id = (machine_id or "").strip()
    if not machine_id:
        raise APIError(400, ErrorCode.BAD_REQUEST, "machine_id parameter is required")

    cursor = page.decoded_cursor(TimeDescCursor)
    return await asyncio.to_thread(repos.videos.list_by_machine, machine_id, page.limit, cursor)


@router.post("/upload-url", response_model=UploadURLResponse)
async def create_upload_url(
    body: UploadURLRequest,
    user_id: str = Depends(get_current_user),
    limiter: Optional[Limiter] = Depends(get_upload_limiter),
    storage: ObjectStorage = Depends(get_object_storage),
):
    """Issue presigned upload URLs for a video and its thumbnail.

    Limited per user by the upload token bucket.
    """
    req = validate_upload_request(body)

    await enforce_rate_limit(limiter, user_id)

    extension = ALLOWED_VIDEO_CONTENT_TYPES[req.content_type]
    video_key = f"videos/{uuid.uuid4()}{extension}"
    thumb_key = f"videos/thumbs/{uuid.uuid4()}.jpg"

    upload_url = await storage.presign_put(video_key, req.content_type, req.bytes, UPLOAD_URL_TTL)
    thumb_upload_url = await storage.presign_put(thumb_key, THUMBNAIL_CONTENT_TYPE, 0, UPLOAD_URL_TTL)

    logger.info(
        "upload_url_issued",
        user_id=user_id,
        machine_id=req.machine_id,
        video_key=video_key,
        bytes=req.bytes,
    )

    return UploadURLResponse(
        upload_url=upload_url,
        video_key=video_key,
        thumb_upload_url=thumb_upload_url,
        thumb_key=thumb_key,
    )


@router.get(
    "/{video_id}/comments",
    response_model=Page[VideoComment],
    response_model_exclude_none=True,
)
async def list_video_comments(
    video_id: str,
    page: PageParams = Depends(page_params(default=20, maximum=100)),
    repos: Repositories = Depends(get_repositories),
):
    """Comments on a video, newest first."""
    cursor = page.decoded_cursor(TimeDescCursor)
    return await asyncio.to_thread(repos.comments.list_by_video, video_id, page.limit, cursor)


@router.post("/{video_id}/comments", response_model=VideoComment, status_code=201)
async def create_video_comment(
    video_id: str,
    body: CommentCreateRequest,
    user_id: str = Depends(get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """Comment on a video."""
    text = body.text.strip()
    if not text:
        raise APIError(400, ErrorCode.BAD_REQUEST, "text required")
    if len(text) > MAX_COMMENT_LENGTH:
        raise APIError(400, ErrorCode.BAD_REQUEST, "comment too long")

    return await asyncio.to_thread(repos.comments.create, video_id, user_id, text)
