"""
Member model.

A member is looked up by the lowercase form of its handle; the numeric
user id is the identity key every statistics record hangs off.
"""
from sqlalchemy import BigInteger, Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from member_stats.api.models.audit import AuditMixin, BigIntId
from member_stats.core.database import Base


class Member(AuditMixin, Base):
    """Member profile (only the columns statistics endpoints need)."""
    __tablename__ = "members"

    user_id = Column(BigInteger, primary_key=True, autoincrement=False)
    handle = Column(String(64), nullable=False)
    handle_lower = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255))
    first_name = Column(String(64))
    last_name = Column(String(64))
    status = Column(String(32), default="ACTIVE", nullable=False)
    verified = Column(Boolean, default=False)

    max_rating = relationship(
        "MaxRating",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Member {self.user_id}: {self.handle}>"


class MaxRating(AuditMixin, Base):
    """Highest rating a member has reached, with its display color."""
    __tablename__ = "member_max_ratings"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, ForeignKey("members.user_id"), nullable=False, unique=True)
    rating = Column(Integer, nullable=False)
    track = Column(String(32))
    sub_track = Column(String(64))
    rating_color = Column(String(16))
