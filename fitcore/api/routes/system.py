"""System routes for fitcore."""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter

from fitcore import __version__
from fitcore.infrastructure.health import checks

router = APIRouter(tags=["System"])

# A dependency switched off by configuration does not degrade the service
_OK_STATUSES = ("healthy", "skipped")


@router.get("/health")
async def health_check():
    """Health check with Supabase/Redis testing. Returns service status, version, and dependency health."""
    database_health, redis_health = await asyncio.gather(
        checks.test_database_connection(), checks.test_redis_connection()
    )
    degraded = any(
        health["status"] not in _OK_STATUSES for health in (database_health, redis_health)
    )

    return {
        "status": "degraded" if degraded else "healthy",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "dependencies": {"database": database_health, "redis": redis_health},
    }
