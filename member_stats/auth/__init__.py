"""
Authentication and authorization for the member statistics API.
"""
from member_stats.auth.models import AuthUser
from member_stats.auth.permissions import can_manage_member, has_admin_role

__all__ = [
    "AuthUser",
    "can_manage_member",
    "has_admin_role",
]
