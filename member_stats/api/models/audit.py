"""
Shared column types and audit columns for member statistics models.
"""
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, Integer, String

# 64-bit ids in Postgres; SQLite only autoincrements INTEGER primary keys.
BigIntId = BigInteger().with_variant(Integer(), "sqlite")

# Line items are addressed by id across requests, so SQLite must never
# hand a deleted id to a later insert.
LINE_ITEM_TABLE_ARGS = {"sqlite_autoincrement": True}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditMixin:
    """created/updated stamps carried by every row."""

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    created_by = Column(String(64), nullable=False)
    updated_at = Column(DateTime(timezone=True))
    updated_by = Column(String(64))
