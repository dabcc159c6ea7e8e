"""Abuse report repository for fitcore."""

import uuid
from datetime import datetime, timezone

from fitcore.core.logging import logger
from fitcore.infrastructure.database.repositories.base import BaseRepository
from fitcore.models import Report


class ReportRepository(BaseRepository[Report]):
    """Repository for reports table operations."""

    def table_name(self) -> str:
        """Return table name."""
        return "reports"

    def create(self, reporter_id: str, object_type: str, object_id: str, reason: str) -> Report:
        """Store a new open report."""
        report = Report(
            id=str(uuid.uuid4()),
            reporter_id=reporter_id,
            object_type=object_type,
            object_id=object_id,
            reason=reason,
            created_at=datetime.now(timezone.utc),
        )
        self._execute(
            "create", self.db.table(self.table_name()).insert(report.model_dump(mode="json"))
        )

        logger.info(
            "report_created",
            report_id=report.id,
            reporter_id=reporter_id,
            object_type=object_type,
            object_id=object_id,
        )
        return report
