"""Limiter construction from configuration."""

from datetime import timedelta

from fitcore.config import config
from fitcore.core.logging import logger
from fitcore.infrastructure.rate_limit.limiter import InMemoryTokenBucket, Limiter, TokenBucket


def build_limiter(prefix: str, rate: int, interval_seconds: float, redis_client=None) -> Limiter:
    """Build the configured limiter for ``prefix``.

    Fails fast with ValueError on a non-positive rate or interval so a bad
    deployment never starts serving.
    """
    interval = timedelta(seconds=interval_seconds)
    backend = config.rate_limit_backend()

    if backend == "memory":
        limiter: Limiter = InMemoryTokenBucket(prefix, rate, interval)
    elif backend == "redis":
        if redis_client is None:
            raise ValueError(f"ratelimit: redis client required for limiter '{prefix}'")
        limiter = TokenBucket(redis_client, prefix, rate, interval)
    else:
        raise ValueError(f"ratelimit: unknown backend '{backend}'")

    logger.info(
        "rate_limiter_configured",
        prefix=prefix,
        backend=backend,
        rate=rate,
        interval_seconds=interval_seconds,
    )
    return limiter
