"""HTTP layer for fitcore."""

from fitcore.api.app import create_app

__all__ = ["create_app"]
