"""
Models for the member statistics service.
"""
from member_stats.api.models.member import Member, MaxRating
from member_stats.api.models.member_stats import (
    MemberStats,
    DevelopStats,
    DevelopStatsItem,
    DesignStats,
    DesignStatsItem,
    DataScienceStats,
    SrmStats,
    SrmChallengeDetail,
    SrmDivisionStats,
    MarathonStats,
    CopilotStats,
)
from member_stats.api.models.history_stats import (
    MemberHistoryStats,
    DevelopHistoryEntry,
    DataScienceHistoryEntry,
)
from member_stats.api.models.skill import (
    SkillCategory,
    Skill,
    DisplayMode,
    SkillLevel,
    MemberSkill,
    MemberSkillLevel,
)
from member_stats.api.models.distribution import DistributionStats

__all__ = [
    'Member',
    'MaxRating',
    'MemberStats',
    'DevelopStats',
    'DevelopStatsItem',
    'DesignStats',
    'DesignStatsItem',
    'DataScienceStats',
    'SrmStats',
    'SrmChallengeDetail',
    'SrmDivisionStats',
    'MarathonStats',
    'CopilotStats',
    'MemberHistoryStats',
    'DevelopHistoryEntry',
    'DataScienceHistoryEntry',
    'SkillCategory',
    'Skill',
    'DisplayMode',
    'SkillLevel',
    'MemberSkill',
    'MemberSkillLevel',
    'DistributionStats',
]
