"""Configuration management for fitcore.

Centralizes all environment variable access for better testability and maintainability.
"""

import os
from typing import Optional


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Config:
    """Application configuration loaded from environment variables."""

    # Logging
    @staticmethod
    def log_level() -> str:
        """Get log level name (DEBUG, INFO, WARNING, ERROR)."""
        return os.environ.get("LOG_LEVEL", "INFO").upper()

    # Supabase (Postgres via PostgREST)
    @staticmethod
    def supabase_url() -> Optional[str]:
        """Get Supabase project URL from environment."""
        return os.environ.get("SUPABASE_URL")

    @staticmethod
    def supabase_service_role_key() -> Optional[str]:
        """Get Supabase service role key from environment."""
        return os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    @staticmethod
    def database_backend() -> str:
        """Get repository backend: "supabase" or "memory" (process-local tables for development)."""
        return os.environ.get("DATABASE_BACKEND", "supabase").lower()

    # Redis
    @staticmethod
    def redis_url() -> str:
        """Get Redis connection URL."""
        return os.environ.get("REDIS_URL", "redis://localhost:6379/0")

    @staticmethod
    def redis_timeout_seconds() -> float:
        """Get socket timeout for Redis round trips."""
        return _env_float("REDIS_TIMEOUT_SECONDS", 2.0)

    # Auth
    @staticmethod
    def jwt_secret() -> Optional[str]:
        """Get HS256 secret used to verify bearer tokens."""
        return os.environ.get("JWT_SECRET")

    # Rate limiting
    @staticmethod
    def rate_limit_backend() -> str:
        """Get rate limiter backend: "redis" (shared) or "memory" (single process)."""
        return os.environ.get("RATE_LIMIT_BACKEND", "redis").lower()

    @staticmethod
    def upload_rate_limit() -> int:
        """Get upload URL requests allowed per interval."""
        return _env_int("UPLOAD_RATE_LIMIT", 5)

    @staticmethod
    def upload_rate_interval_seconds() -> float:
        """Get upload limiter refill interval."""
        return _env_float("UPLOAD_RATE_INTERVAL_SECONDS", 60.0)

    @staticmethod
    def report_rate_limit() -> int:
        """Get abuse reports allowed per interval."""
        return _env_int("REPORT_RATE_LIMIT", 5)

    @staticmethod
    def report_rate_interval_seconds() -> float:
        """Get report limiter refill interval."""
        return _env_float("REPORT_RATE_INTERVAL_SECONDS", 60.0)

    # Uploads
    @staticmethod
    def max_upload_mb() -> int:
        """Get maximum accepted video size in megabytes (0 disables the check)."""
        return _env_int("MAX_UPLOAD_MB", 100)

    # Object storage (S3 or any S3-compatible endpoint)
    @staticmethod
    def s3_bucket() -> Optional[str]:
        """Get bucket for uploaded videos and thumbnails (unset disables uploads)."""
        return os.environ.get("S3_BUCKET")

    @staticmethod
    def s3_region() -> str:
        """Get bucket region."""
        return os.environ.get("S3_REGION", "us-east-1")

    @staticmethod
    def s3_endpoint_url() -> Optional[str]:
        """Get custom endpoint, e.g. MinIO; unset means AWS."""
        return os.environ.get("S3_ENDPOINT_URL") or None

    @staticmethod
    def s3_access_key_id() -> Optional[str]:
        """Get access key; unset falls back to the default AWS credential chain."""
        return os.environ.get("S3_ACCESS_KEY_ID")

    @staticmethod
    def s3_secret_access_key() -> Optional[str]:
        """Get secret key paired with S3_ACCESS_KEY_ID."""
        return os.environ.get("S3_SECRET_ACCESS_KEY")

    # Helper methods
    @staticmethod
    def is_configured() -> bool:
        """Check if all required configuration is present."""
        return not Config.get_missing_config()

    @staticmethod
    def get_missing_config() -> list[str]:
        """Get list of missing required configuration keys."""
        missing = []
        if not Config.jwt_secret():
            missing.append("JWT_SECRET")
        if Config.database_backend() == "supabase":
            if not Config.supabase_url():
                missing.append("SUPABASE_URL")
            if not Config.supabase_service_role_key():
                missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing


# Singleton instance for easy access
config = Config()
