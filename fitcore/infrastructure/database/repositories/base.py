"""Base repository interface for fitcore.

Implements Repository pattern with Dependency Inversion principle.
All concrete repositories inherit from BaseRepository and query Supabase
(PostgREST) through the shared client.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from fitcore.core.errors import DatabaseError
from fitcore.core.logging import logger
from fitcore.infrastructure.database.client import SupabaseClient

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository for database operations.

    Provides dependency inversion - depend on repository interface, not concrete tables.
    """

    def __init__(self, client: Optional[SupabaseClient] = None):
        """Initialize repository with Supabase client."""
        self._client = client or SupabaseClient()

    @property
    def db(self):
        """Get Supabase client instance."""
        return self._client.client

    @abstractmethod
    def table_name(self) -> str:
        """Return the table name this repository manages."""
        pass

    def _execute(self, operation: str, query) -> List[Dict[str, Any]]:
        """Run a built query and return its rows.

        Raises:
            DatabaseError: The request failed
        """
        try:
            result = query.execute()
        except Exception as e:
            logger.error(
                "database_query_failed",
                table=self.table_name(),
                operation=operation,
                error=str(e),
            )
            raise DatabaseError(f"{self.table_name()}.{operation} failed") from e

        return result.data or []

    def _get_by_id(self, row_id: str) -> Optional[Dict[str, Any]]:
        rows = self._execute(
            "get", self.db.table(self.table_name()).select("*").eq("id", row_id).limit(1)
        )
        return rows[0] if rows else None
