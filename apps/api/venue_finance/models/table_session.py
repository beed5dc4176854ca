# venue_finance/models/table_session.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID

from venue_finance.models.base import Base
from venue_finance.models.enums import SessionStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TableSessionORM(Base):
    """
    Table rental session. Only the fields read by the finance engine are mapped.

    total_cost includes any POS orders linked to the session.
    """

    __tablename__ = "table_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    table_id = Column(UUID(as_uuid=True), nullable=True, index=True)

    status = Column(String(16), nullable=False, default=SessionStatus.ACTIVE.value, index=True)
    started_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    ended_at = Column(DateTime(timezone=True), nullable=True, index=True)
    total_cost = Column(Numeric(14, 2), nullable=True)

    __table_args__ = (
        Index("ix_table_sessions_company_ended", "company_id", "ended_at"),
    )


class TableMaintenanceORM(Base):
    """Scheduled table maintenance and its cost."""

    __tablename__ = "table_maintenance"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    table_id = Column(UUID(as_uuid=True), nullable=True, index=True)

    description = Column(Text, nullable=True)
    cost = Column(Numeric(14, 2), nullable=True)
    maintenance_at = Column(DateTime(timezone=True), nullable=False, index=True)

    __table_args__ = (
        Index("ix_table_maintenance_company_at", "company_id", "maintenance_at"),
    )
