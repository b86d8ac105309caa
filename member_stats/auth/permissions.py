"""Role checks and member-level access control."""

from typing import Iterable, Optional

from member_stats.auth.models import AuthUser
from member_stats.core.config import settings


def has_admin_role(user: Optional[AuthUser], admin_roles: Optional[Iterable[str]] = None) -> bool:
    """Check if the user holds any administrative role (case-insensitive)."""
    if user is None or not user.roles:
        return False
    allowed = {r.lower() for r in (admin_roles if admin_roles is not None else settings.ADMIN_ROLES)}
    return any(role.lower() in allowed for role in user.roles)


def can_manage_member(user: Optional[AuthUser], member) -> bool:
    """
    Whether the user may manage the member's data.

    True for machine callers, administrators, and the member themself
    (handles compared case-insensitively).
    """
    if user is None:
        return False
    if user.is_machine or has_admin_role(user):
        return True
    return bool(user.handle) and user.handle.lower() == member.handle_lower.lower()
