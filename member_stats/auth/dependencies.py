"""
Authentication dependencies.

FastAPI dependencies for route protection and caller context.
"""
from typing import Optional
import logging

from fastapi import Depends, Request

from member_stats.api.exceptions import UnauthorizedError
from member_stats.auth.models import AuthUser
from member_stats.auth.tokens import InvalidTokenError, decode_token

logger = logging.getLogger(__name__)


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Invalid authorization header")
    return token.strip()


async def get_optional_user(request: Request) -> Optional[AuthUser]:
    """
    Get the caller from the bearer token (optional).

    Returns None when no Authorization header is sent. A header that is
    present but invalid is still rejected.

    Raises:
        UnauthorizedError: If the token cannot be verified
    """
    token = _bearer_token(request)
    if token is None:
        return None

    try:
        return decode_token(token)
    except InvalidTokenError as e:
        client = request.client.host if request.client else "unknown"
        logger.debug(f"Rejected bearer token from {client}: {e}")
        raise UnauthorizedError("Invalid token")


async def require_user(
    user: Optional[AuthUser] = Depends(get_optional_user),
) -> AuthUser:
    """
    Require an authenticated caller.

    Raises:
        UnauthorizedError: 401 if no token was sent
    """
    if user is None:
        raise UnauthorizedError()
    return user
