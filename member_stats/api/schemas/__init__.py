"""Request schemas."""
from member_stats.api.schemas.requests import (
    HistoryStatsPayload,
    MemberSkillPayload,
    MemberStatsPayload,
)

__all__ = [
    "HistoryStatsPayload",
    "MemberSkillPayload",
    "MemberStatsPayload",
]
