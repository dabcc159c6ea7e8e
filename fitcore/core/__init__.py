"""Core building blocks for fitcore: pagination, errors, logging."""
