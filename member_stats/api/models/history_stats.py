"""
Member rating history models.

History entries attach directly to the history record; there is no
per-track block in between.
"""
from sqlalchemy import BigInteger, Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from member_stats.api.models.audit import LINE_ITEM_TABLE_ARGS, AuditMixin, BigIntId
from member_stats.core.database import Base


class MemberHistoryStats(AuditMixin, Base):
    """Rating history for a member within one group scope."""
    __tablename__ = "member_history_stats"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, ForeignKey("members.user_id"), nullable=False)
    group_id = Column(BigInteger, nullable=True)
    is_private = Column(Boolean, default=False, nullable=False)

    develop = relationship(
        "DevelopHistoryEntry",
        cascade="all, delete-orphan",
        order_by="DevelopHistoryEntry.id",
        lazy="selectin",
    )
    data_science = relationship(
        "DataScienceHistoryEntry",
        cascade="all, delete-orphan",
        order_by="DataScienceHistoryEntry.id",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_member_history_stats_user_group", "user_id", "group_id"),
    )

    def __repr__(self):
        return f"<MemberHistoryStats {self.id}: user={self.user_id} group={self.group_id}>"


class DevelopHistoryEntry(AuditMixin, Base):
    __tablename__ = "member_develop_history_stats"
    __table_args__ = LINE_ITEM_TABLE_ARGS

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    history_stats_id = Column(BigIntId, ForeignKey("member_history_stats.id"), nullable=False, index=True)
    challenge_id = Column(BigInteger, nullable=False)
    challenge_name = Column(String(255), nullable=False)
    rating_date = Column(DateTime(timezone=True), nullable=False)
    new_rating = Column(Integer, nullable=False)
    sub_track = Column(String(64), nullable=False)
    sub_track_id = Column(Integer, nullable=False)


class DataScienceHistoryEntry(AuditMixin, Base):
    __tablename__ = "member_data_science_history_stats"
    __table_args__ = LINE_ITEM_TABLE_ARGS

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    history_stats_id = Column(BigIntId, ForeignKey("member_history_stats.id"), nullable=False, index=True)
    challenge_id = Column(BigInteger, nullable=False)
    challenge_name = Column(String(255), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    rating = Column(Integer, nullable=False)
    placement = Column(Integer, nullable=False)
    percentile = Column(Float, nullable=False)
    sub_track = Column(String(64), nullable=False)
    sub_track_id = Column(Integer, nullable=False)
