"""
FastAPI dependency providers for the service layer.

Services are request scoped (they hold the request's session); the group
access resolver is built once per process.
"""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from member_stats.api.services.distribution_service import DistributionService
from member_stats.api.services.group_access import GroupAccessResolver
from member_stats.api.services.skill_service import SkillService
from member_stats.api.services.statistics_service import StatisticsService
from member_stats.core.config import settings
from member_stats.core.database import get_db


@lru_cache()
def get_group_resolver() -> GroupAccessResolver:
    return GroupAccessResolver(public_group_id=settings.PUBLIC_GROUP_ID)


def get_statistics_service(
    db: AsyncSession = Depends(get_db),
    group_resolver: GroupAccessResolver = Depends(get_group_resolver),
) -> StatisticsService:
    return StatisticsService(db, group_resolver)


def get_skill_service(db: AsyncSession = Depends(get_db)) -> SkillService:
    return SkillService(db)


def get_distribution_service(db: AsyncSession = Depends(get_db)) -> DistributionService:
    return DistributionService(db)
