"""Shared key-value store access."""

from fitcore.infrastructure.store.client import RedisClient

__all__ = ["RedisClient"]
