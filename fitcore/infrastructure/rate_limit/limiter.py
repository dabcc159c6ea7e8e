"""Token bucket rate limiting for fitcore.

Buckets hold at most ``rate`` tokens and refill continuously at ``rate`` tokens
per ``interval``. Refill is computed lazily on each call, so there is no
background timer. The shared limiter keeps bucket state in Redis and runs the
whole read-refill-decide-write sequence as one Lua script.
"""

import math
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Dict, Optional, Tuple

from redis.exceptions import RedisError

from fitcore.core.errors import RateLimitStoreError
from fitcore.core.logging import logger

Clock = Callable[[], int]

# KEYS[1] bucket key; ARGV rate, capacity, interval_ms, now_ms.
# Returns {allowed, retry_after_ms, remaining}; remaining is a string so
# fractional tokens are not truncated by the integer reply conversion.
TOKEN_BUCKET_SCRIPT = """
local key = KEYS[1]
local rate = tonumber(ARGV[1])
local capacity = tonumber(ARGV[2])
local interval = tonumber(ARGV[3])
local now = tonumber(ARGV[4])

local data = redis.call("HMGET", key, "tokens", "timestamp")
local tokens = tonumber(data[1])
local timestamp = tonumber(data[2])

if tokens == nil or timestamp == nil then
    tokens = capacity
    timestamp = now
end

local delta = now - timestamp
if delta > 0 then
    tokens = math.min(capacity, tokens + delta * rate / interval)
    timestamp = now
end

if tokens < 1 then
    redis.call("HSET", key, "tokens", tostring(tokens), "timestamp", timestamp)
    redis.call("PEXPIRE", key, math.ceil(interval))
    local wait = math.ceil((1 - tokens) * interval / rate)
    return {0, wait, tostring(tokens)}
end

tokens = tokens - 1
redis.call("HSET", key, "tokens", tostring(tokens), "timestamp", timestamp)
redis.call("PEXPIRE", key, math.ceil(interval))
return {1, 0, tostring(tokens)}
"""


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Decision:
    """Outcome of a single rate limit check."""

    allowed: bool
    retry_after: timedelta = timedelta(0)
    remaining: float = 0.0


def take_token(
    tokens: Optional[float],
    timestamp: Optional[int],
    now: int,
    rate: float,
    capacity: float,
    interval_ms: int,
) -> Tuple[bool, int, float, int]:
    """Refill a bucket lazily and try to take one token.

    Mirrors ``TOKEN_BUCKET_SCRIPT`` for stores that serialize access in
    process.

    Returns:
        (allowed, retry_after_ms, tokens_after, timestamp_after)
    """
    if tokens is None or timestamp is None:
        tokens = capacity
        timestamp = now

    delta = now - timestamp
    if delta > 0:
        tokens = min(capacity, tokens + delta * rate / interval_ms)
        timestamp = now

    if tokens < 1:
        wait = math.ceil((1 - tokens) * interval_ms / rate)
        return False, wait, tokens, timestamp

    return True, 0, tokens - 1, timestamp


class Limiter(ABC):
    """Admission control keyed by caller identity."""

    @abstractmethod
    async def allow(self, identity: str) -> Decision:
        """Try to admit one request for ``identity``.

        Raises:
            RateLimitStoreError: the bucket state could not be read or written
        """


class _BucketLimiter(Limiter):
    """Shared configuration for token bucket limiters."""

    def __init__(self, prefix: str, rate: int, interval: timedelta, clock: Optional[Clock] = None):
        if rate <= 0:
            raise ValueError("ratelimit: rate must be positive")
        interval_ms = int(interval.total_seconds() * 1000)
        if interval_ms <= 0:
            raise ValueError("ratelimit: interval must be positive")

        self.prefix = prefix
        self.rate = float(rate)
        self.capacity = float(rate)
        self.interval = interval
        self.interval_ms = interval_ms
        self._clock = clock or _now_ms

    def key_for(self, identity: str) -> str:
        """Get the bucket key for an identity."""
        return f"{self.prefix}:{identity}"

    def _log_decision(self, key: str, decision: Decision) -> None:
        if decision.allowed:
            logger.debug("rate_limit_check_passed", key=key, remaining=decision.remaining)
        else:
            logger.warning(
                "rate_limit_exceeded",
                key=key,
                remaining=decision.remaining,
                retry_after_ms=int(decision.retry_after.total_seconds() * 1000),
            )


class TokenBucket(_BucketLimiter):
    """Redis-backed token bucket shared by every API instance."""

    def __init__(
        self,
        client,
        prefix: str,
        rate: int,
        interval: timedelta,
        clock: Optional[Clock] = None,
    ):
        """Initialize limiter.

        Args:
            client: ``redis.asyncio.Redis`` instance
            prefix: Key namespace, e.g. "videos:upload"
            rate: Tokens granted per interval (also the bucket capacity)
            interval: Refill interval
            clock: Returns current time in epoch milliseconds (for tests)

        Raises:
            ValueError: rate or interval is not positive
        """
        super().__init__(prefix, rate, interval, clock)
        if client is None:
            raise ValueError("ratelimit: redis client is required")
        self._client = client
        self._script = client.register_script(TOKEN_BUCKET_SCRIPT)

    async def allow(self, identity: str) -> Decision:
        key = self.key_for(identity)
        args = [self.rate, self.capacity, self.interval_ms, self._clock()]

        try:
            result = await self._script(keys=[key], args=args)
        except RedisError as e:
            logger.error("rate_limit_check_failed", key=key, error=str(e))
            raise RateLimitStoreError(f"ratelimit: script execution failed: {e}") from e

        decision = self._parse(result)
        self._log_decision(key, decision)
        return decision

    @staticmethod
    def _parse(result) -> Decision:
        if not isinstance(result, (list, tuple)) or len(result) < 3:
            raise RateLimitStoreError(f"ratelimit: unexpected script result {result!r}")

        try:
            allowed = int(result[0]) == 1
            retry_ms = int(result[1])
            remaining = float(result[2])
        except (TypeError, ValueError) as e:
            raise RateLimitStoreError(f"ratelimit: unexpected script result {result!r}") from e

        return Decision(
            allowed=allowed,
            retry_after=timedelta(milliseconds=retry_ms),
            remaining=remaining,
        )


class InMemoryTokenBucket(_BucketLimiter):
    """Process-local token bucket for single-instance deployments and tests."""

    def __init__(self, prefix: str, rate: int, interval: timedelta, clock: Optional[Clock] = None):
        super().__init__(prefix, rate, interval, clock)
        self._lock = threading.Lock()
        # key -> (tokens, timestamp_ms, expires_at_ms)
        self._buckets: Dict[str, Tuple[float, int, int]] = {}

    async def allow(self, identity: str) -> Decision:
        key = self.key_for(identity)
        now = self._clock()

        with self._lock:
            tokens, timestamp = None, None
            state = self._buckets.get(key)
            if state is not None and now < state[2]:
                tokens, timestamp = state[0], state[1]

            allowed, wait, tokens, timestamp = take_token(
                tokens, timestamp, now, self.rate, self.capacity, self.interval_ms
            )
            self._buckets[key] = (tokens, timestamp, now + self.interval_ms)

        decision = Decision(
            allowed=allowed,
            retry_after=timedelta(milliseconds=wait),
            remaining=tokens,
        )
        self._log_decision(key, decision)
        return decision

    def reset(self) -> None:
        """Drop all bucket state."""
        with self._lock:
            self._buckets.clear()
