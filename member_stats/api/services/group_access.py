"""
Group visibility for statistics reads.

A member may hold one public record and one private record per group.
Which of them a caller gets to see is decided here.
"""
from typing import List, Optional, Sequence
import logging

from member_stats.auth import AuthUser, can_manage_member
from member_stats.core.config import PUBLIC_GROUP_ID

logger = logging.getLogger(__name__)


class GroupAccessResolver:
    """
    Resolves the group ids a caller may read for a member.

    Args:
        public_group_id: Id reported for the public record
    """

    def __init__(self, public_group_id: int = PUBLIC_GROUP_ID):
        self.public_group_id = public_group_id

    async def allowed_group_ids(
        self,
        user: Optional[AuthUser],
        member,
        requested: Optional[Sequence[int]] = None,
    ) -> List[int]:
        """
        Filter the requested group ids down to the visible ones.

        With no request only the public group is returned. The public group
        is visible to everyone; private groups only to callers who can
        manage the member.

        Returns:
            Visible group ids in request order, without repeats
        """
        if not requested:
            return [self.public_group_id]

        may_see_private = can_manage_member(user, member)
        allowed = []
        for group_id in dict.fromkeys(requested):
            if group_id == self.public_group_id or may_see_private:
                allowed.append(group_id)
        if len(allowed) < len(set(requested)):
            logger.debug(
                f"Hid private groups of {member.handle} from "
                f"{user.actor if user else 'anonymous'}"
            )
        return allowed
