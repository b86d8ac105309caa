"""
Request payload schemas.

Wire format is camelCase; unknown keys are rejected so that a typo never
silently drops data. Attribute names match the ORM column names so a
validated payload can be written straight onto a row.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PayloadModel(BaseModel):
    """Base for all request bodies."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def values(self, *exclude: str) -> Dict[str, Any]:
        """Scalar fields the client actually sent, without `id` or `exclude`."""
        return self.model_dump(exclude_unset=True, exclude={"id", *exclude})


# =============================================================================
# Stats history
# =============================================================================

class DevelopHistoryItem(PayloadModel):
    id: Optional[int] = None
    challenge_id: int
    challenge_name: str
    rating_date: datetime
    new_rating: int
    sub_track: str
    sub_track_id: int


class DataScienceHistoryItem(PayloadModel):
    id: Optional[int] = None
    challenge_id: int
    challenge_name: str
    date: datetime
    rating: int
    placement: int
    percentile: float
    sub_track: Literal["SRM", "MARATHON_MATCH"]
    sub_track_id: int


class HistoryStatsPayload(PayloadModel):
    """Body of POST/PATCH /members/{handle}/stats/history."""
    group_id: Optional[int] = None
    is_private: Optional[bool] = None
    develop: Optional[List[DevelopHistoryItem]] = None
    data_science: Optional[List[DataScienceHistoryItem]] = None


# =============================================================================
# Member stats
# =============================================================================

class StatsItem(PayloadModel):
    """One subtrack line item."""
    id: Optional[int] = None
    name: str
    sub_track_id: int
    challenges: Optional[int] = None
    wins: Optional[int] = None
    most_recent_submission: Optional[datetime] = None
    most_recent_event_date: Optional[datetime] = None


class DesignStatsItemPayload(StatsItem):
    num_inquiries: Optional[int] = None
    submissions: Optional[int] = None
    passed_screening: Optional[int] = None
    avg_placement: Optional[float] = None
    screening_success_rate: Optional[float] = None
    submission_rate: Optional[float] = None
    win_percent: Optional[float] = None


class DevelopStatsItemPayload(StatsItem):
    num_inquiries: Optional[int] = None
    submissions: Optional[int] = None
    passed_screening: Optional[int] = None
    passed_review: Optional[int] = None
    appeals: Optional[int] = None
    appeal_success_rate: Optional[float] = None
    min_score: Optional[float] = None
    avg_placement: Optional[float] = None
    review_success_rate: Optional[float] = None
    max_score: Optional[float] = None
    avg_score: Optional[float] = None
    screening_success_rate: Optional[float] = None
    submission_rate: Optional[float] = None
    win_percent: Optional[float] = None
    overall_percentile: Optional[float] = None
    active_rank: Optional[int] = None
    overall_country_rank: Optional[int] = None
    reliability: Optional[float] = None
    rating: Optional[int] = None
    min_rating: Optional[int] = None
    volatility: Optional[int] = None
    overall_school_rank: Optional[int] = None
    overall_rank: Optional[int] = None
    active_school_rank: Optional[int] = None
    active_country_rank: Optional[int] = None
    max_rating: Optional[int] = None
    active_percentile: Optional[float] = None


class TrackTotals(PayloadModel):
    # `id` is accepted for wire compatibility; track blocks are found by parent.
    id: Optional[int] = None
    challenges: Optional[int] = None
    wins: Optional[int] = None
    most_recent_submission: Optional[datetime] = None
    most_recent_event_date: Optional[datetime] = None


class DevelopTrackPayload(TrackTotals):
    items: Optional[List[DevelopStatsItemPayload]] = None


class DesignTrackPayload(TrackTotals):
    items: Optional[List[DesignStatsItemPayload]] = None


class SrmChallengeDetailPayload(PayloadModel):
    id: Optional[int] = None
    level_name: str
    challenges: Optional[int] = None
    failed_challenges: Optional[int] = None


class SrmDivisionPayload(PayloadModel):
    id: Optional[int] = None
    division_name: Literal["division1", "division2"]
    level_name: str
    problems_submitted: Optional[int] = None
    problems_sys_by_test: Optional[int] = None
    problems_failed: Optional[int] = None


class SrmPayload(TrackTotals):
    most_recent_event_name: Optional[str] = None
    rating: Optional[int] = None
    percentile: Optional[float] = None
    rank: Optional[int] = None
    country_rank: Optional[int] = None
    school_rank: Optional[int] = None
    volatility: Optional[int] = None
    maximum_rating: Optional[int] = None
    minimum_rating: Optional[int] = None
    default_language: Optional[str] = None
    competitions: Optional[int] = None
    challenge_details: Optional[List[SrmChallengeDetailPayload]] = None
    divisions: Optional[List[SrmDivisionPayload]] = None


class MarathonPayload(TrackTotals):
    most_recent_event_name: Optional[str] = None
    rating: Optional[int] = None
    competitions: Optional[int] = None
    avg_rank: Optional[float] = None
    avg_num_submissions: Optional[int] = None
    best_rank: Optional[int] = None
    top_five_finishes: Optional[int] = None
    top_ten_finishes: Optional[int] = None
    rank: Optional[int] = None
    percentile: Optional[float] = None
    volatility: Optional[int] = None
    minimum_rating: Optional[int] = None
    maximum_rating: Optional[int] = None
    country_rank: Optional[int] = None
    school_rank: Optional[int] = None
    default_language: Optional[str] = None


class DataScienceTrackPayload(TrackTotals):
    most_recent_event_name: Optional[str] = None
    srm: Optional[SrmPayload] = None
    marathon: Optional[MarathonPayload] = None


class CopilotPayload(PayloadModel):
    id: Optional[int] = None
    contests: Optional[int] = None
    projects: Optional[int] = None
    failures: Optional[int] = None
    reposts: Optional[int] = None
    active_contests: Optional[int] = None
    active_projects: Optional[int] = None
    fulfillment: Optional[float] = None


class MemberStatsPayload(PayloadModel):
    """Body of POST/PATCH /members/{handle}/stats."""
    group_id: Optional[int] = None
    is_private: Optional[bool] = None
    challenges: Optional[int] = None
    wins: Optional[int] = None
    max_rating_id: Optional[int] = None
    develop: Optional[DevelopTrackPayload] = None
    design: Optional[DesignTrackPayload] = None
    data_science: Optional[DataScienceTrackPayload] = None
    copilot: Optional[CopilotPayload] = None


# =============================================================================
# Skills
# =============================================================================

class MemberSkillPayload(PayloadModel):
    """Body of POST/PATCH /members/{handle}/skills."""
    skill_id: UUID
    display_mode_id: Optional[UUID] = None
    levels: Optional[List[UUID]] = None
