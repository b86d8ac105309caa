"""
Skill catalogue and member skill models.
"""
import uuid

from sqlalchemy import BigInteger, Column, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from member_stats.api.models.audit import AuditMixin
from member_stats.core.database import Base


class SkillCategory(Base):
    __tablename__ = "skill_categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(128), nullable=False)


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(128), nullable=False)
    category_id = Column(Uuid, ForeignKey("skill_categories.id"), nullable=False)

    category = relationship("SkillCategory", lazy="selectin")


class DisplayMode(Base):
    __tablename__ = "display_modes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(64), nullable=False)


class SkillLevel(Base):
    __tablename__ = "skill_levels"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(64), nullable=False)
    description = Column(Text)


class MemberSkill(AuditMixin, Base):
    """A skill claimed by a member, with optional display mode and levels."""
    __tablename__ = "member_skills"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(BigInteger, ForeignKey("members.user_id"), nullable=False, index=True)
    skill_id = Column(Uuid, ForeignKey("skills.id"), nullable=False)
    display_mode_id = Column(Uuid, ForeignKey("display_modes.id"), nullable=True)

    skill = relationship("Skill", lazy="selectin")
    display_mode = relationship("DisplayMode", lazy="selectin")
    levels = relationship(
        "MemberSkillLevel",
        cascade="all, delete-orphan",
        order_by="MemberSkillLevel.created_at",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "skill_id", name="uq_member_skills_user_skill"),
    )


class MemberSkillLevel(AuditMixin, Base):
    __tablename__ = "member_skill_levels"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    member_skill_id = Column(Uuid, ForeignKey("member_skills.id"), nullable=False, index=True)
    skill_level_id = Column(Uuid, ForeignKey("skill_levels.id"), nullable=False)

    skill_level = relationship("SkillLevel", lazy="selectin")
