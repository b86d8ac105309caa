"""
Member skill routes.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from member_stats.api.dependencies import get_skill_service
from member_stats.api.schemas.requests import MemberSkillPayload
from member_stats.api.services.skill_service import SkillService
from member_stats.auth.dependencies import require_user
from member_stats.auth.models import AuthUser

router = APIRouter(prefix="/members", tags=["skills"])


@router.get("/{handle}/skills")
async def get_member_skills(
    handle: str,
    service: SkillService = Depends(get_skill_service),
) -> List[Dict[str, Any]]:
    return await service.get_member_skills(handle)


@router.post("/{handle}/skills")
async def create_member_skill(
    handle: str,
    payload: MemberSkillPayload,
    user: AuthUser = Depends(require_user),
    service: SkillService = Depends(get_skill_service),
) -> List[Dict[str, Any]]:
    return await service.create_member_skill(user, handle, payload)


@router.patch("/{handle}/skills")
async def update_member_skill(
    handle: str,
    payload: MemberSkillPayload,
    user: AuthUser = Depends(require_user),
    service: SkillService = Depends(get_skill_service),
) -> List[Dict[str, Any]]:
    return await service.update_member_skill(user, handle, payload)
