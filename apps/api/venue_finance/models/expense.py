# venue_finance/models/expense.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID

from venue_finance.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpenseORM(Base):
    """Manual expense entry.

    Managed per company.
    - category: one of ExpenseCategory (STAFF, UTILITIES, MAINTENANCE, SUPPLIES, ...)
    - expense_date: the calendar date the expense is booked on (venue-local)
    """

    __tablename__ = "expenses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    expense_date = Column(Date, nullable=False, index=True)
    category = Column(String(32), nullable=False, index=True)
    description = Column(String(255), nullable=False)

    amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))

    notes = Column(Text, nullable=True)

    created_by_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("ix_expenses_company_date", "company_id", "expense_date"),
        Index("ix_expenses_company_category", "company_id", "category"),
    )
