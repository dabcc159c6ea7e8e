"""Machine, instruction video and comment repositories for fitcore."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from fitcore.core.logging import logger
from fitcore.core.pagination import Page, TimeDescCursor, time_desc_page
from fitcore.infrastructure.database.repositories.base import BaseRepository
from fitcore.infrastructure.database.repositories.keyset import fetch_size, time_desc_filter
from fitcore.models import InstructionVideo, Machine, VideoComment


class MachineRepository(BaseRepository[Machine]):
    """Repository for machines table operations."""

    def table_name(self) -> str:
        """Return table name."""
        return "machines"

    def get(self, machine_id: str) -> Optional[Machine]:
        """Get a machine by ID, or None."""
        row = self._get_by_id(machine_id)
        return Machine.model_validate(row) if row else None


class VideoRepository(BaseRepository[InstructionVideo]):
    """Repository for instruction_videos table operations."""

    def table_name(self) -> str:
        """Return table name."""
        return "instruction_videos"

    def list_by_machine(
        self, machine_id: str, limit: int, cursor: Optional[TimeDescCursor] = None
    ) -> Page[InstructionVideo]:
        """Videos for a machine, newest first (created_at DESC, id DESC)."""
        size = fetch_size(limit)

        query = self.db.table(self.table_name()).select("*").eq("machine_id", machine_id)
        if cursor is not None:
            query = query.or_(time_desc_filter(cursor))
        query = query.order("created_at", desc=True).order("id", desc=True).limit(size)

        rows = self._execute("list_by_machine", query)
        return time_desc_page(
            [InstructionVideo.model_validate(row) for row in rows],
            limit,
            lambda video: TimeDescCursor(created_at=video.created_at, id=video.id),
        )


class CommentRepository(BaseRepository[VideoComment]):
    """Repository for video_comments table operations."""

    def table_name(self) -> str:
        """Return table name."""
        return "video_comments"

    def create(self, video_id: str, user_id: str, text: str) -> VideoComment:
        """Store a comment on a video.

        Args:
            video_id: Commented video
            user_id: Author
            text: Trimmed, length-checked body

        Returns:
            The stored comment
        """
        comment = VideoComment(
            id=str(uuid.uuid4()),
            video_id=video_id,
            user_id=user_id,
            text=text,
            created_at=datetime.now(timezone.utc),
        )
        self._execute(
            "create",
            self.db.table(self.table_name()).insert(comment.model_dump(mode="json")),
        )

        logger.info("comment_created", comment_id=comment.id, video_id=video_id, user_id=user_id)
        return comment

    def list_by_video(
        self, video_id: str, limit: int, cursor: Optional[TimeDescCursor] = None
    ) -> Page[VideoComment]:
        """Comments on a video, newest first (created_at DESC, id DESC)."""
        size = fetch_size(limit)

        query = self.db.table(self.table_name()).select("*").eq("video_id", video_id)
        if cursor is not None:
            query = query.or_(time_desc_filter(cursor))
        query = query.order("created_at", desc=True).order("id", desc=True).limit(size)

        rows = self._execute("list_by_video", query)
        return time_desc_page(
            [VideoComment.model_validate(row) for row in rows],
            limit,
            lambda comment: TimeDescCursor(created_at=comment.created_at, id=comment.id),
        )
