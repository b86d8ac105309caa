"""
Skill Repository.

Member skills plus the catalogue lookups used to validate them.
"""
from typing import List, Optional, Sequence
from uuid import UUID
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from member_stats.api.models import DisplayMode, MemberSkill, Skill, SkillLevel


class SkillRepository:
    """Repository for member skills and the skill catalogue."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_member(self, user_id: int) -> List[MemberSkill]:
        """All skills of a member, freshly read, in creation order."""
        result = await self.db.execute(
            select(MemberSkill)
            .where(MemberSkill.user_id == user_id)
            .order_by(MemberSkill.created_at, MemberSkill.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def find_member_skill(self, user_id: int, skill_id: UUID) -> Optional[MemberSkill]:
        result = await self.db.execute(
            select(MemberSkill).where(
                MemberSkill.user_id == user_id,
                MemberSkill.skill_id == skill_id,
            )
        )
        return result.scalar_one_or_none()

    async def skill_exists(self, skill_id: UUID) -> bool:
        return await self.db.get(Skill, skill_id) is not None

    async def display_mode_exists(self, display_mode_id: UUID) -> bool:
        return await self.db.get(DisplayMode, display_mode_id) is not None

    async def count_levels(self, level_ids: Sequence[UUID]) -> int:
        """
        Count how many of the given skill level ids exist.

        Args:
            level_ids: Candidate SkillLevel ids (duplicates are counted once)

        Returns:
            Number of distinct ids that match a SkillLevel
        """
        result = await self.db.execute(
            select(func.count(SkillLevel.id)).where(SkillLevel.id.in_(list(set(level_ids))))
        )
        return result.scalar_one()
