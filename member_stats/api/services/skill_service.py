"""
Member skill service.
"""
from typing import Any, Dict, List
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from member_stats.api.exceptions import BadRequestError, ForbiddenError, NotFoundError
from member_stats.api.models import MemberSkill, MemberSkillLevel
from member_stats.api.models.audit import utcnow
from member_stats.api.repositories import MemberRepository, SkillRepository
from member_stats.api.schemas.requests import MemberSkillPayload
from member_stats.api.services.response_builder import build_member_skills
from member_stats.auth import AuthUser, can_manage_member
from member_stats.core.database import atomic

logger = logging.getLogger(__name__)


class SkillService:
    """Reads and maintains the skills a member claims."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.members = MemberRepository(db)
        self.skills = SkillRepository(db)

    async def get_member_skills(self, handle: str) -> List[Dict[str, Any]]:
        """
        Get the skills of a member.

        Raises:
            NotFoundError: Unknown handle
        """
        member = await self.members.get_by_handle(handle)
        return build_member_skills(await self.skills.list_for_member(member.user_id))

    async def _validate_references(self, payload: MemberSkillPayload) -> None:
        """Check that the display mode and skill levels the payload names exist."""
        if payload.display_mode_id is not None:
            if not await self.skills.display_mode_exists(payload.display_mode_id):
                raise BadRequestError(f"Display mode {payload.display_mode_id} does not exist")
        if payload.levels:
            wanted = set(payload.levels)
            if await self.skills.count_levels(wanted) != len(wanted):
                raise BadRequestError("Please make sure skill level exists")

    def _levels(self, payload: MemberSkillPayload, actor: str) -> List[MemberSkillLevel]:
        return [
            MemberSkillLevel(skill_level_id=level_id, created_by=actor)
            for level_id in dict.fromkeys(payload.levels or [])
        ]

    async def create_member_skill(self, user: AuthUser, handle: str, payload: MemberSkillPayload) -> List[Dict[str, Any]]:
        """
        Add a skill to a member.

        Returns:
            The member's full skill list after the insert

        Raises:
            NotFoundError: Unknown handle
            ForbiddenError: Caller cannot manage the member
            BadRequestError: Skill already claimed, or an unknown skill,
                display mode or level
        """
        member = await self.members.get_by_handle(handle)
        if not can_manage_member(user, member):
            raise ForbiddenError("You are not allowed to create the member skills.")
        if await self.skills.find_member_skill(member.user_id, payload.skill_id) is not None:
            raise BadRequestError("This member skill exists")
        if not await self.skills.skill_exists(payload.skill_id):
            raise BadRequestError(f"Skill {payload.skill_id} does not exist")
        await self._validate_references(payload)

        actor = user.actor
        member_skill = MemberSkill(
            user_id=member.user_id,
            skill_id=payload.skill_id,
            display_mode_id=payload.display_mode_id,
            created_by=actor,
        )
        member_skill.levels = self._levels(payload, actor)

        async with atomic(self.db):
            self.db.add(member_skill)

        logger.info(f"Added skill {payload.skill_id} to {member.handle} by {actor}")
        return await self.get_member_skills(handle)

    async def update_member_skill(self, user: AuthUser, handle: str, payload: MemberSkillPayload) -> List[Dict[str, Any]]:
        """
        Partially update one of a member's skills.

        A display mode replaces the stored one; a non-empty level list
        replaces every stored level.

        Raises:
            NotFoundError: Unknown handle, or the member lacks this skill
            ForbiddenError: Caller cannot manage the member
            BadRequestError: Unknown display mode or level
        """
        member = await self.members.get_by_handle(handle)
        if not can_manage_member(user, member):
            raise ForbiddenError("You are not allowed to update the member skills.")
        member_skill = await self.skills.find_member_skill(member.user_id, payload.skill_id)
        if member_skill is None:
            raise NotFoundError("Member skill not found")
        await self._validate_references(payload)

        actor = user.actor
        async with atomic(self.db):
            if payload.display_mode_id is not None:
                member_skill.display_mode_id = payload.display_mode_id
            if payload.levels:
                member_skill.levels = self._levels(payload, actor)
            member_skill.updated_by = actor
            member_skill.updated_at = utcnow()

        logger.info(f"Updated skill {payload.skill_id} of {member.handle} by {actor}")
        return await self.get_member_skills(handle)
