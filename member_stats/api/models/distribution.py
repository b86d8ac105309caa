"""
Rating distribution model.

`distribution` holds one counter per rating bucket, keyed
`ratingRange<low>To<high>`.
"""
from sqlalchemy import JSON, Column, String

from member_stats.api.models.audit import AuditMixin, BigIntId
from member_stats.core.database import Base


class DistributionStats(AuditMixin, Base):
    __tablename__ = "distribution_stats"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    track = Column(String(32), nullable=False, index=True)
    sub_track = Column(String(64), nullable=False, index=True)
    distribution = Column(JSON, default=dict, nullable=False)
