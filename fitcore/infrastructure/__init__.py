"""Infrastructure for fitcore: rate limiting, auth, storage, data access, health."""
