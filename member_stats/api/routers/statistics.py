"""
Member statistics routes.

- /members/stats/distribution: summed rating distribution
- /members/{handle}/stats: current statistics per group
- /members/{handle}/stats/history: rating history per group
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from member_stats.api.dependencies import get_distribution_service, get_statistics_service
from member_stats.api.schemas.requests import HistoryStatsPayload, MemberStatsPayload
from member_stats.api.services.distribution_service import DistributionService
from member_stats.api.services.statistics_service import StatisticsService
from member_stats.auth.dependencies import get_optional_user, require_user
from member_stats.auth.models import AuthUser

router = APIRouter(prefix="/members", tags=["statistics"])


# =============================================================================
# DISTRIBUTION
# =============================================================================

@router.get("/stats/distribution")
async def get_distribution(
    track: Optional[str] = Query(None),
    sub_track: Optional[str] = Query(None, alias="subTrack"),
    fields: Optional[str] = Query(None),
    service: DistributionService = Depends(get_distribution_service),
) -> Dict[str, Any]:
    """Summed rating distribution for a track/subtrack."""
    return await service.get_distribution(track, sub_track, fields)


# =============================================================================
# HISTORY STATS
# =============================================================================

@router.get("/{handle}/stats/history")
async def get_history_stats(
    handle: str,
    group_ids: Optional[str] = Query(None, alias="groupIds"),
    fields: Optional[str] = Query(None),
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> List[Dict[str, Any]]:
    return await service.get_history_stats(user, handle, fields, group_ids)


@router.post("/{handle}/stats/history", status_code=status.HTTP_201_CREATED)
async def create_history_stats(
    handle: str,
    payload: HistoryStatsPayload,
    user: AuthUser = Depends(require_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> Dict[str, Any]:
    return await service.create_history_stats(user, handle, payload)


@router.patch("/{handle}/stats/history")
async def update_history_stats(
    handle: str,
    payload: HistoryStatsPayload,
    user: AuthUser = Depends(require_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> Dict[str, Any]:
    return await service.update_history_stats(user, handle, payload)


# =============================================================================
# MEMBER STATS
# =============================================================================

@router.get("/{handle}/stats")
async def get_member_stats(
    handle: str,
    group_ids: Optional[str] = Query(None, alias="groupIds"),
    fields: Optional[str] = Query(None),
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> List[Dict[str, Any]]:
    return await service.get_member_stats(user, handle, fields, group_ids)


@router.post("/{handle}/stats", status_code=status.HTTP_201_CREATED)
async def create_member_stats(
    handle: str,
    payload: MemberStatsPayload,
    user: AuthUser = Depends(require_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> Dict[str, Any]:
    return await service.create_member_stats(user, handle, payload)


@router.patch("/{handle}/stats")
async def update_member_stats(
    handle: str,
    payload: MemberStatsPayload,
    user: AuthUser = Depends(require_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> Dict[str, Any]:
    return await service.update_member_stats(user, handle, payload)
