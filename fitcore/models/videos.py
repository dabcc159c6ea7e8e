"""Instruction video models for fitcore."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# Accepted upload content types and the object key extension for each
ALLOWED_VIDEO_CONTENT_TYPES = {
    "video/mp4": ".mp4",
    "video/quicktime": ".mov",
}


class InstructionVideo(BaseModel):
    """Instruction video for a machine."""

    id: str
    machine_id: str
    uploader_id: str
    title: str
    description: Optional[str] = None
    video_key: str
    thumb_key: Optional[str] = None
    duration_sec: Optional[int] = None
    created_at: datetime


class UploadURLRequest(BaseModel):
    """Request for presigned video and thumbnail upload URLs."""

    machine_id: str = Field("", description="Machine the video demonstrates")
    title: str = Field("", description="Video title")
    description: str = Field("", description="Optional description")
    content_type: str = Field("", description="video/mp4 or video/quicktime")
    bytes: int = Field(0, description="Size of the video file in bytes")


class UploadURLResponse(BaseModel):
    """Presigned upload URLs and the object keys they write to."""

    upload_url: str
    video_key: str
    thumb_upload_url: str
    thumb_key: str


class Machine(BaseModel):
    """Gym machine or piece of equipment."""

    id: str
    name: str
    body_part: str = ""
    created_at: datetime
