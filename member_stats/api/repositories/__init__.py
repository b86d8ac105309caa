"""
Repository layer.

Exports all repository classes for easy importing.
"""
from member_stats.api.repositories.distribution_repository import DistributionRepository
from member_stats.api.repositories.member_repository import MemberRepository
from member_stats.api.repositories.skill_repository import SkillRepository
from member_stats.api.repositories.stats_repository import HistoryStatsRepository, MemberStatsRepository


__all__ = [
    "DistributionRepository",
    "HistoryStatsRepository",
    "MemberRepository",
    "MemberStatsRepository",
    "SkillRepository",
]
