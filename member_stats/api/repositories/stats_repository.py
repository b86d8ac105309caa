"""
Statistics Repositories.

Member stats and history stats share the same scoping rule: one record per
(member, group). The public record is the one with `is_private` false; a
private record is addressed by its group id.
"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from member_stats.api.models import MemberHistoryStats, MemberStats


class _ScopedStatsRepository:
    """Lookups shared by the member stats and history stats tables."""

    model = None

    def __init__(self, db: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            db: SQLAlchemy async database session
        """
        self.db = db

    async def _first(self, *criteria, refresh: bool = False):
        stmt = select(self.model).where(*criteria).order_by(self.model.id).limit(1)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def find_public(self, user_id: int):
        """Get the member's public record, or None."""
        return await self._first(
            self.model.user_id == user_id,
            self.model.is_private.is_(False),
        )

    async def find_private(self, user_id: int, group_id: int):
        """Get the member's record for a private group, or None."""
        return await self._first(
            self.model.user_id == user_id,
            self.model.group_id == group_id,
            self.model.is_private.is_(True),
        )

    async def find_by_scope(self, user_id: int, group_id: Optional[int]):
        """
        Get the record a write targets.

        Args:
            user_id: Member user id
            group_id: Group id, or None for the record without a group

        Returns:
            The record, or None
        """
        if group_id is None:
            group_clause = self.model.group_id.is_(None)
        else:
            group_clause = self.model.group_id == group_id
        return await self._first(self.model.user_id == user_id, group_clause)

    async def reload(self, record_id: int):
        """
        Re-read a record and all of its child rows.

        Rows already in the session are overwritten with database state so
        collections changed by reconciliation are read back fresh.
        """
        return await self._first(self.model.id == record_id, refresh=True)


class MemberStatsRepository(_ScopedStatsRepository):
    """Access to MemberStats records."""
    model = MemberStats


class HistoryStatsRepository(_ScopedStatsRepository):
    """Access to MemberHistoryStats records."""
    model = MemberHistoryStats
