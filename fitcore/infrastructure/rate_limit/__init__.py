"""Rate limiting module for fitcore.

Provides token bucket limiters keyed by caller identity:
- TokenBucket: shared state in Redis, atomic via a Lua script
- InMemoryTokenBucket: process-local state behind a mutex
"""

from fitcore.infrastructure.rate_limit.deps import enforce_rate_limit, retry_after_seconds
from fitcore.infrastructure.rate_limit.factory import build_limiter
from fitcore.infrastructure.rate_limit.limiter import (
    Decision,
    InMemoryTokenBucket,
    Limiter,
    TokenBucket,
    take_token,
)

__all__ = [
    "Decision",
    "InMemoryTokenBucket",
    "Limiter",
    "TokenBucket",
    "build_limiter",
    "enforce_rate_limit",
    "retry_after_seconds",
    "take_token",
]
