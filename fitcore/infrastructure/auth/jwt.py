"""JWT authentication for fitcore.

Verifies HS256 bearer tokens issued by the account service.
"""

import jwt

from fitcore.config import config
from fitcore.core.errors import APIError, ErrorCode
from fitcore.core.logging import logger


def verify_jwt_token(token: str) -> str:
    """Verify JWT token locally using the shared secret.

    Args:
        token: JWT token string (without "Bearer " prefix)

    Returns:
        User ID from the ``user_id`` claim, falling back to ``sub``

    Raises:
        APIError: 401 if token invalid or expired, 500 if not configured
    """
    jwt_secret = config.jwt_secret()

    if not jwt_secret:
        logger.error("jwt_verification_failed", reason="JWT_SECRET not configured")
        raise APIError(500, ErrorCode.INTERNAL, "authentication is not configured")

    try:
        payload = jwt.decode(token, jwt_secret, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        logger.warning("jwt_token_expired")
        raise APIError(401, ErrorCode.UNAUTHORIZED, "token expired")
    except jwt.InvalidTokenError as e:
        logger.warning("jwt_token_invalid", error=str(e))
        raise APIError(401, ErrorCode.UNAUTHORIZED, "invalid token")

    user_id = payload.get("user_id") or payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise APIError(401, ErrorCode.UNAUTHORIZED, "invalid token: missing user id")

    logger.debug("jwt_token_verified", user_id=user_id)
    return user_id
