"""
Authentication data models.

AuthUser is the decoded identity of the bearer token on a request. The
service only consumes tokens; issuing them is the identity provider's job.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class AuthUser:
    """
    Caller identity.

    Machine (M2M) callers have no handle; they are identified by `sub`
    and carry scopes instead of roles.
    """
    sub: str
    handle: Optional[str] = None
    user_id: Optional[int] = None
    roles: List[str] = field(default_factory=list)
    scopes: List[str] = field(default_factory=list)
    is_machine: bool = False

    @property
    def actor(self) -> str:
        """Value stamped into created_by / updated_by."""
        return self.handle or self.sub
