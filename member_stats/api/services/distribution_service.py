"""
Rating distribution service.

Several distribution rows can match one track/subtrack filter; their
bucket counters are summed into a single document.
"""
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from member_stats.api.exceptions import NotFoundError
from member_stats.api.repositories import DistributionRepository
from member_stats.api.services.query_params import parse_comma_separated
from member_stats.api.services.response_builder import select_fields, to_epoch_ms

DISTRIBUTION_FIELDS = (
    "track", "subTrack", "distribution", "createdAt", "updatedAt", "createdBy", "updatedBy",
)


class DistributionService:
    """Aggregates rating distribution rows."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.distributions = DistributionRepository(db)

    async def get_distribution(
        self,
        track: Optional[str] = None,
        sub_track: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get the summed rating distribution for a track and subtrack.

        Args:
            track: Track filter (substring, case-insensitive)
            sub_track: Subtrack filter (substring, case-insensitive)
            fields: Comma separated top-level keys to keep

        Returns:
            Distribution document; createdAt/createdBy come from the oldest
            row, updatedAt/updatedBy from the most recently updated one

        Raises:
            BadRequestError: Malformed `fields`
            NotFoundError: No row matches
        """
        selected = parse_comma_separated(fields, DISTRIBUTION_FIELDS)
        rows = await self.distributions.search(track, sub_track)
        if not rows:
            raise NotFoundError("No member distribution statistics is found.")

        distribution: Dict[str, float] = {}
        for row in rows:
            for bucket, count in (row.distribution or {}).items():
                distribution[bucket] = distribution.get(bucket, 0) + (count or 0)

        oldest = min(rows, key=lambda row: to_epoch_ms(row.created_at))
        updated = [row for row in rows if row.updated_at is not None]
        latest = max(updated, key=lambda row: to_epoch_ms(row.updated_at)) if updated else None

        result = {
            "track": track,
            "subTrack": sub_track,
            "distribution": distribution,
            "createdAt": to_epoch_ms(oldest.created_at),
            "createdBy": oldest.created_by,
            "updatedAt": to_epoch_ms(latest.updated_at) if latest else None,
            "updatedBy": latest.updated_by if latest else None,
        }
        return select_fields(result, selected)
