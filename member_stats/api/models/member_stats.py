"""
Member statistics models.

One MemberStats row exists per (member, group) scope. Each competition
track hangs off it as its own table; DEVELOP and DESIGN carry per-subtrack
line items, DATA_SCIENCE nests SRM and marathon sub-records, and COPILOT
is a flat set of counters.
"""
from sqlalchemy import (
    BigInteger, Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String,
)
from sqlalchemy.orm import relationship

from member_stats.api.models.audit import LINE_ITEM_TABLE_ARGS, AuditMixin, BigIntId
from member_stats.core.database import Base


class MemberStats(AuditMixin, Base):
    """Current statistics for a member within one group scope."""
    __tablename__ = "member_stats"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, ForeignKey("members.user_id"), nullable=False)
    group_id = Column(BigInteger, nullable=True)
    is_private = Column(Boolean, default=False, nullable=False)
    challenges = Column(Integer)
    wins = Column(Integer)
    member_rating_id = Column(BigIntId, ForeignKey("member_max_ratings.id"), nullable=True)

    develop = relationship("DevelopStats", uselist=False, cascade="all, delete-orphan", lazy="selectin")
    design = relationship("DesignStats", uselist=False, cascade="all, delete-orphan", lazy="selectin")
    data_science = relationship("DataScienceStats", uselist=False, cascade="all, delete-orphan", lazy="selectin")
    copilot = relationship("CopilotStats", uselist=False, cascade="all, delete-orphan", lazy="selectin")

    __table_args__ = (
        Index("idx_member_stats_user_group", "user_id", "group_id"),
    )

    def __repr__(self):
        return f"<MemberStats {self.id}: user={self.user_id} group={self.group_id}>"


class _TrackTotals:
    challenges = Column(BigInteger)
    wins = Column(BigInteger)
    most_recent_submission = Column(DateTime(timezone=True))
    most_recent_event_date = Column(DateTime(timezone=True))


# =============================================================================
# DEVELOP
# =============================================================================

class DevelopStats(_TrackTotals, AuditMixin, Base):
    __tablename__ = "member_develop_stats"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    member_stats_id = Column(BigIntId, ForeignKey("member_stats.id"), nullable=False, unique=True)

    items = relationship(
        "DevelopStatsItem",
        cascade="all, delete-orphan",
        order_by="DevelopStatsItem.id",
        lazy="selectin",
    )


class DevelopStatsItem(_TrackTotals, AuditMixin, Base):
    """Per-subtrack development statistics."""
    __tablename__ = "member_develop_stats_items"
    __table_args__ = LINE_ITEM_TABLE_ARGS

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    develop_stats_id = Column(BigIntId, ForeignKey("member_develop_stats.id"), nullable=False, index=True)
    name = Column(String(64), nullable=False)
    sub_track_id = Column(Integer, nullable=False)

    # submissions
    num_inquiries = Column(BigInteger)
    submissions = Column(BigInteger)
    passed_screening = Column(BigInteger)
    passed_review = Column(BigInteger)
    appeals = Column(BigInteger)
    appeal_success_rate = Column(Float)
    min_score = Column(Float)
    avg_placement = Column(Float)
    review_success_rate = Column(Float)
    max_score = Column(Float)
    avg_score = Column(Float)
    screening_success_rate = Column(Float)
    submission_rate = Column(Float)
    win_percent = Column(Float)

    # rank
    overall_percentile = Column(Float)
    active_rank = Column(Integer)
    overall_country_rank = Column(Integer)
    reliability = Column(Float)
    rating = Column(Integer)
    min_rating = Column(Integer)
    volatility = Column(Integer)
    overall_school_rank = Column(Integer)
    overall_rank = Column(Integer)
    active_school_rank = Column(Integer)
    active_country_rank = Column(Integer)
    max_rating = Column(Integer)
    active_percentile = Column(Float)


# =============================================================================
# DESIGN
# =============================================================================

class DesignStats(_TrackTotals, AuditMixin, Base):
    __tablename__ = "member_design_stats"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    member_stats_id = Column(BigIntId, ForeignKey("member_stats.id"), nullable=False, unique=True)

    items = relationship(
        "DesignStatsItem",
        cascade="all, delete-orphan",
        order_by="DesignStatsItem.id",
        lazy="selectin",
    )


class DesignStatsItem(_TrackTotals, AuditMixin, Base):
    """Per-subtrack design statistics."""
    __tablename__ = "member_design_stats_items"
    __table_args__ = LINE_ITEM_TABLE_ARGS

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    design_stats_id = Column(BigIntId, ForeignKey("member_design_stats.id"), nullable=False, index=True)
    name = Column(String(64), nullable=False)
    sub_track_id = Column(Integer, nullable=False)
    num_inquiries = Column(BigInteger)
    submissions = Column(BigInteger)
    passed_screening = Column(BigInteger)
    avg_placement = Column(Float)
    screening_success_rate = Column(Float)
    submission_rate = Column(Float)
    win_percent = Column(Float)


# =============================================================================
# DATA SCIENCE
# =============================================================================

class DataScienceStats(_TrackTotals, AuditMixin, Base):
    __tablename__ = "member_data_science_stats"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    member_stats_id = Column(BigIntId, ForeignKey("member_stats.id"), nullable=False, unique=True)
    most_recent_event_name = Column(String(128))

    srm = relationship("SrmStats", uselist=False, cascade="all, delete-orphan", lazy="selectin")
    marathon = relationship("MarathonStats", uselist=False, cascade="all, delete-orphan", lazy="selectin")


class SrmStats(_TrackTotals, AuditMixin, Base):
    __tablename__ = "member_srm_stats"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    data_science_stats_id = Column(
        BigIntId, ForeignKey("member_data_science_stats.id"), nullable=False, unique=True
    )
    most_recent_event_name = Column(String(128))
    rating = Column(Integer)
    percentile = Column(Float)
    rank = Column(Integer)
    country_rank = Column(Integer)
    school_rank = Column(Integer)
    volatility = Column(Integer)
    maximum_rating = Column(Integer)
    minimum_rating = Column(Integer)
    default_language = Column(String(32))
    competitions = Column(Integer)

    challenge_details = relationship(
        "SrmChallengeDetail",
        cascade="all, delete-orphan",
        order_by="SrmChallengeDetail.id",
        lazy="selectin",
    )
    divisions = relationship(
        "SrmDivisionStats",
        cascade="all, delete-orphan",
        order_by="SrmDivisionStats.id",
        lazy="selectin",
    )


class SrmChallengeDetail(AuditMixin, Base):
    __tablename__ = "member_srm_challenge_details"
    __table_args__ = LINE_ITEM_TABLE_ARGS

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    srm_stats_id = Column(BigIntId, ForeignKey("member_srm_stats.id"), nullable=False, index=True)
    challenges = Column(Integer)
    failed_challenges = Column(Integer)
    level_name = Column(String(32), nullable=False)


class SrmDivisionStats(AuditMixin, Base):
    """SRM results for one problem level within division1 or division2."""
    __tablename__ = "member_srm_division_stats"
    __table_args__ = LINE_ITEM_TABLE_ARGS

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    srm_stats_id = Column(BigIntId, ForeignKey("member_srm_stats.id"), nullable=False, index=True)
    division_name = Column(String(16), nullable=False)
    level_name = Column(String(32), nullable=False)
    problems_submitted = Column(Integer)
    problems_sys_by_test = Column(Integer)
    problems_failed = Column(Integer)


class MarathonStats(_TrackTotals, AuditMixin, Base):
    __tablename__ = "member_marathon_stats"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    data_science_stats_id = Column(
        BigIntId, ForeignKey("member_data_science_stats.id"), nullable=False, unique=True
    )
    most_recent_event_name = Column(String(128))
    rating = Column(Integer)
    competitions = Column(Integer)
    avg_rank = Column(Float)
    avg_num_submissions = Column(Integer)
    best_rank = Column(Integer)
    top_five_finishes = Column(Integer)
    top_ten_finishes = Column(Integer)
    rank = Column(Integer)
    percentile = Column(Float)
    volatility = Column(Integer)
    minimum_rating = Column(Integer)
    maximum_rating = Column(Integer)
    country_rank = Column(Integer)
    school_rank = Column(Integer)
    default_language = Column(String(32))


# =============================================================================
# COPILOT
# =============================================================================

class CopilotStats(AuditMixin, Base):
    __tablename__ = "member_copilot_stats"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    member_stats_id = Column(BigIntId, ForeignKey("member_stats.id"), nullable=False, unique=True)
    contests = Column(Integer)
    projects = Column(Integer)
    failures = Column(Integer)
    reposts = Column(Integer)
    active_contests = Column(Integer)
    active_projects = Column(Integer)
    fulfillment = Column(Float)
