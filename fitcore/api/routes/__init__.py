"""Route modules for fitcore."""
