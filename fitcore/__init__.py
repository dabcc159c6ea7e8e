"""fitcore - cursor pagination and token bucket rate limiting for the gym API."""

__version__ = "1.0.0"
