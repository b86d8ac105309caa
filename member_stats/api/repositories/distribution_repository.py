"""
Distribution Repository.
"""
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from member_stats.api.models import DistributionStats


class DistributionRepository:
    """Read access to rating distribution rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search(
        self,
        track: Optional[str] = None,
        sub_track: Optional[str] = None,
    ) -> List[DistributionStats]:
        """
        Find distribution rows whose track and subtrack contain the filters.

        Filters are matched as uppercase substrings; a missing filter
        matches every row.

        Args:
            track: Track filter, e.g. "develop"
            sub_track: Subtrack filter, e.g. "code"

        Returns:
            Matching rows ordered by id
        """
        stmt = select(DistributionStats)
        if track:
            stmt = stmt.where(DistributionStats.track.contains(track.upper()))
        if sub_track:
            stmt = stmt.where(DistributionStats.sub_track.contains(sub_track.upper()))
        result = await self.db.execute(stmt.order_by(DistributionStats.id))
        return list(result.scalars().all())
