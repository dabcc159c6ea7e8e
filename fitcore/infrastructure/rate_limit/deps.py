"""FastAPI rate limiting helpers for fitcore.

Turns limiter decisions into API errors for route handlers.
"""

import math
from typing import Optional

from fitcore.core.errors import APIError, ErrorCode
from fitcore.infrastructure.rate_limit.limiter import Decision, Limiter


def retry_after_seconds(decision: Decision) -> int:
    """Whole seconds a denied caller should wait (at least 1)."""
    seconds = math.ceil(decision.retry_after.total_seconds())
    return seconds if seconds > 0 else 1


async def enforce_rate_limit(
    limiter: Optional[Limiter], identity: str, message: Optional[str] = None
) -> Optional[Decision]:
    """Consume one token for ``identity`` or reject the request.

    Args:
        limiter: Limiter guarding the route (None disables the check)
        identity: Caller identity, usually the authenticated user id
        message: Override for the 429 message

    Returns:
        The admitting decision, or None when no limiter is configured

    Raises:
        APIError: 429 with Retry-After header if the bucket is empty
        RateLimitStoreError: bucket store unavailable; never treated as an allow
    """
    if limiter is None:
        return None

    decision = await limiter.allow(identity)

    if not decision.allowed:
        seconds = retry_after_seconds(decision)
        raise APIError(
            status=429,
            code=ErrorCode.TOO_MANY_REQUESTS,
            message=message or f"Rate limit exceeded. Try again in {seconds} seconds.",
            headers={"Retry-After": str(seconds)},
        )

    return decision
