"""Abuse report models for fitcore."""

from datetime import datetime

from pydantic import BaseModel, Field

REPORTABLE_OBJECT_TYPES = ("review", "video")


class ReportCreateRequest(BaseModel):
    """Request to flag a review or video for moderation."""

    object_type: str = Field("", description="review or video")
    object_id: str = Field("", description="ID of the reported object")
    reason: str = Field("", description="Why the object is being reported")


class Report(BaseModel):
    """Stored abuse report."""

    id: str
    reporter_id: str
    object_type: str
    object_id: str
    reason: str
    status: str = "open"
    created_at: datetime
