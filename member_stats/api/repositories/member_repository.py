"""
Member Repository.

Looks members up by handle; every statistics operation starts here.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from member_stats.api.exceptions import NotFoundError
from member_stats.api.models import Member

logger = logging.getLogger(__name__)


class MemberRepository:
    """Read access to member profiles."""

    def __init__(self, db: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            db: SQLAlchemy async database session
        """
        self.db = db

    async def get_by_handle(self, handle: str) -> Member:
        """
        Get a member by handle, ignoring case and surrounding whitespace.

        Args:
            handle: Member handle as given by the caller

        Returns:
            Member, with its max rating loaded

        Raises:
            NotFoundError: If no member has this handle
        """
        handle_lower = handle.strip().lower()
        result = await self.db.execute(
            select(Member).where(Member.handle_lower == handle_lower)
        )
        member = result.scalar_one_or_none()
        if member is None:
            logger.debug(f"Member lookup failed for handle {handle_lower!r}")
            raise NotFoundError(f'Member with handle: "{handle}" doesn\'t exist')
        return member
