"""
Bearer token decoding.

User tokens carry namespaced claims (e.g. "https://topcoder.com/handle");
machine tokens are client-credentials grants with a space separated scope.
"""
import logging
from typing import Any, Dict, List, Optional

from jose import JWTError, jwt

from member_stats.auth.models import AuthUser
from member_stats.core.config import settings

logger = logging.getLogger(__name__)

MACHINE_GRANT_TYPE = "client-credentials"


class InvalidTokenError(Exception):
    """Token could not be decoded or verified."""


def _claim(payload: Dict[str, Any], name: str) -> Any:
    """Look a claim up by bare name or by its namespaced form."""
    if name in payload:
        return payload[name]
    suffix = "/" + name
    for key, value in payload.items():
        if key.endswith(suffix):
            return value
    return None


def user_from_claims(payload: Dict[str, Any]) -> AuthUser:
    """
    Build an AuthUser from already-verified JWT claims.

    Raises:
        InvalidTokenError: If the userId claim is not an integer
    """
    sub = str(payload.get("sub") or "")
    if payload.get("gty") == MACHINE_GRANT_TYPE:
        scope = payload.get("scope") or ""
        scopes: List[str] = scope.split() if isinstance(scope, str) else list(scope)
        return AuthUser(sub=sub, scopes=scopes, is_machine=True)

    user_id = _claim(payload, "userId")
    if user_id is not None:
        try:
            user_id = int(user_id)
        except (TypeError, ValueError) as e:
            raise InvalidTokenError(f"Invalid userId claim: {user_id!r}") from e
    roles = _claim(payload, "roles") or []
    return AuthUser(
        sub=sub,
        handle=_claim(payload, "handle"),
        user_id=user_id,
        roles=list(roles),
        is_machine=False,
    )


def decode_token(token: str, secret: Optional[str] = None) -> AuthUser:
    """
    Verify and decode a bearer token.

    Args:
        token: Raw JWT (without the "Bearer " prefix)
        secret: Signing key; defaults to AUTH_SECRET

    Returns:
        AuthUser for the token

    Raises:
        InvalidTokenError: If the signature, expiry, issuer or userId is invalid
    """
    try:
        payload = jwt.decode(
            token,
            secret or settings.AUTH_SECRET,
            algorithms=settings.JWT_ALGORITHMS,
            options={"verify_aud": False},
        )
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    issuer = payload.get("iss")
    if settings.VALID_ISSUERS and issuer not in settings.VALID_ISSUERS:
        raise InvalidTokenError(f"Invalid issuer: {issuer}")

    return user_from_claims(payload)
