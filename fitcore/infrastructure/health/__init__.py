"""Health checks for fitcore dependencies."""

from fitcore.infrastructure.health.checks import test_database_connection, test_redis_connection

__all__ = ["test_database_connection", "test_redis_connection"]
