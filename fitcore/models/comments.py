"""Video comment models for fitcore."""

from datetime import datetime

from pydantic import BaseModel, Field

MAX_COMMENT_LENGTH = 500


class CommentCreateRequest(BaseModel):
    """Request to comment on an instruction video."""

    text: str = Field("", description=f"Comment body, at most {MAX_COMMENT_LENGTH} characters")


class VideoComment(BaseModel):
    """User comment on an instruction video."""

    id: str
    video_id: str
    user_id: str
    text: str
    created_at: datetime
