"""Supabase client singleton for fitcore.

One PostgREST client per process, created on first use so the app can start
(and the health check can report) before credentials are present.
"""

from typing import Optional

from supabase import Client, create_client

from fitcore.config import config
from fitcore.core.errors import DatabaseError
from fitcore.core.logging import logger


class SupabaseClient:
    """Singleton Supabase client with lazy initialization."""

    _instance: Optional["SupabaseClient"] = None
    _client: Optional[Client] = None

    def __new__(cls):
        """Ensure only one instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def client(self) -> Client:
        """Get Supabase client, initializing if needed.

        Raises:
            DatabaseError: SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set
        """
        if self._client is None:
            url = config.supabase_url()
            key = config.supabase_service_role_key()

            if not url or not key:
                raise DatabaseError(
                    "Supabase not configured. Set SUPABASE_URL and "
                    "SUPABASE_SERVICE_ROLE_KEY environment variables."
                )

            self._client = create_client(url, key)
            logger.info("supabase_client_initialized", url=url)

        return self._client

    def is_configured(self) -> bool:
        """Check if Supabase is properly configured."""
        return config.supabase_url() is not None and config.supabase_service_role_key() is not None
