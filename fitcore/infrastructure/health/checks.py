"""Health check functions for fitcore.

Tests connectivity to external dependencies (Supabase, Redis).
"""

import asyncio
from typing import Any, Dict

from fitcore.config import config
from fitcore.infrastructure.database import SupabaseClient
from fitcore.infrastructure.store import RedisClient


async def test_database_connection() -> Dict[str, Any]:
    """Test Supabase connectivity with minimal query.

    Returns:
        Dict with status ("healthy", "skipped", "unconfigured", "timeout",
        "unavailable") and optional error message
    """
    if config.database_backend() == "memory":
        return {"status": "skipped", "reason": "repositories use in-memory tables"}

    try:
        client = SupabaseClient()
        if not client.is_configured():
            return {"status": "unconfigured", "error": "Supabase credentials not set"}

        supabase = client.client

        # Test connection with simple query
        await asyncio.wait_for(
            asyncio.to_thread(lambda: supabase.table("gyms").select("id").limit(1).execute()),
            timeout=2.0,
        )

        return {"status": "healthy", "database": "connected"}

    except asyncio.TimeoutError:
        return {"status": "timeout", "error": "Request timed out after 2s"}

    except Exception as e:
        return {"status": "unavailable", "error": str(e)[:100]}


async def test_redis_connection() -> Dict[str, Any]:
    """Test Redis connectivity with a PING.

    Returns:
        Dict with status ("healthy", "skipped", "timeout", "unavailable")
        and optional error message
    """
    if config.rate_limit_backend() != "redis":
        return {"status": "skipped", "reason": "rate limiter uses in-memory buckets"}

    try:
        await asyncio.wait_for(RedisClient().ping(), timeout=2.0)
        return {"status": "healthy", "store": "connected"}

    except asyncio.TimeoutError:
        return {"status": "timeout", "error": "Request timed out after 2s"}

    except Exception as e:
        return {"status": "unavailable", "error": str(e)[:100]}
