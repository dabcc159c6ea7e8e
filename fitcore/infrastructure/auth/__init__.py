"""Authentication module for fitcore.

Resolves the caller identity from a bearer JWT. Token issuance lives in the
account service.
"""

from fitcore.infrastructure.auth.deps import get_current_user
from fitcore.infrastructure.auth.jwt import verify_jwt_token

__all__ = [
    "get_current_user",
    "verify_jwt_token",
]
