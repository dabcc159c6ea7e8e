"""Pydantic models for fitcore.

All models are organized by domain:
- gyms: gyms, nearby feed rows, reviews
- videos: instruction videos and upload URL requests
- search: ranked search hits
- reports: abuse reports
- comments: video comments
- exercises: exercise log entries and their sets
"""

# Gym models
from fitcore.models.gyms import (
    Gym,
    GymReview,
    NearbyGym,
)

# Video models
from fitcore.models.videos import (
    ALLOWED_VIDEO_CONTENT_TYPES,
    InstructionVideo,
    Machine,
    UploadURLRequest,
    UploadURLResponse,
)

# Search models
from fitcore.models.search import (
    SearchHit,
    SearchKind,
)

# Report models
from fitcore.models.reports import (
    REPORTABLE_OBJECT_TYPES,
    Report,
    ReportCreateRequest,
)

# Comment models
from fitcore.models.comments import (
    MAX_COMMENT_LENGTH,
    CommentCreateRequest,
    VideoComment,
)

# Exercise models
from fitcore.models.exercises import (
    Exercise,
    ExerciseCreateRequest,
    ExerciseSet,
    ExerciseSetInput,
)

__all__ = [
    # Gyms
    "Gym",
    "GymReview",
    "NearbyGym",
    # Videos
    "ALLOWED_VIDEO_CONTENT_TYPES",
    "InstructionVideo",
    "Machine",
    "UploadURLRequest",
    "UploadURLResponse",
    # Search
    "SearchHit",
    "SearchKind",
    # Reports
    "REPORTABLE_OBJECT_TYPES",
    "Report",
    "ReportCreateRequest",
    # Comments
    "MAX_COMMENT_LENGTH",
    "CommentCreateRequest",
    "VideoComment",
    # Exercises
    "Exercise",
    "ExerciseCreateRequest",
    "ExerciseSet",
    "ExerciseSetInput",
]
