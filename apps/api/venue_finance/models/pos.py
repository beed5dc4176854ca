# venue_finance/models/pos.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.dialects.postgresql import UUID

from venue_finance.models.base import Base
from venue_finance.models.enums import PaymentStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PosOrderORM(Base):
    """
    Point-of-sale order.

    table_session_id is set when the charge is folded into a table session;
    such orders are part of the session's total_cost, not standalone sales.
    """

    __tablename__ = "pos_orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    table_session_id = Column(
        UUID(as_uuid=True),
        ForeignKey("table_sessions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    amount = Column(Numeric(14, 2), nullable=True)
    payment_status = Column(String(16), nullable=False, default=PaymentStatus.PENDING.value, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    __table_args__ = (
        Index("ix_pos_orders_company_created", "company_id", "created_at"),
    )
