"""FastAPI authentication dependencies for fitcore."""

from typing import Optional

from fastapi import Header

from fitcore.core.errors import APIError, ErrorCode
from fitcore.infrastructure.auth.jwt import verify_jwt_token


async def get_current_user(authorization: Optional[str] = Header(None)) -> str:
    """Extract user_id from the bearer token.

    Raises:
        APIError: 401 if the header is missing, malformed, or the token is invalid
    """
    if not authorization:
        raise APIError(401, ErrorCode.UNAUTHORIZED, "unauthorized")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise APIError(
            401,
            ErrorCode.UNAUTHORIZED,
            "Invalid Authorization header format. Use: Authorization: Bearer <token>",
        )

    return verify_jwt_token(token.strip())
