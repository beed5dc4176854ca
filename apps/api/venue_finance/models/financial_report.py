# venue_finance/models/financial_report.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.dialects.postgresql import UUID

from venue_finance.models.base import Base
from venue_finance.models.enums import ReportSource


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _money_column() -> Column:
    return Column(Numeric(14, 2), nullable=False, default=Decimal("0"))


class FinancialReportORM(Base):
    """
    Persisted financial report.

    Identities kept on every write:
      total_income  = sales_income + table_rent_income + other_income
      total_expense = inventory_cost + maintenance_cost + staff_cost + utility_cost + other_expenses
      net_profit    = total_income - total_expense

    source:
      - GENERATED : full generation, always a fresh row
      - POSTED    : created/incremented by expense posting
    """

    __tablename__ = "financial_reports"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(255), nullable=False)
    report_type = Column(String(16), nullable=False, index=True)
    source = Column(String(16), nullable=False, default=ReportSource.GENERATED.value)

    period_start = Column(DateTime(timezone=True), nullable=False)
    period_end = Column(DateTime(timezone=True), nullable=False)

    # income
    sales_income = _money_column()
    table_rent_income = _money_column()
    other_income = _money_column()
    total_income = _money_column()

    # expenses
    inventory_cost = _money_column()
    maintenance_cost = _money_column()
    staff_cost = _money_column()
    utility_cost = _money_column()
    other_expenses = _money_column()
    total_expense = _money_column()

    net_profit = _money_column()

    generated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    generated_by_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        Index("ix_financial_reports_company_type_period", "company_id", "report_type", "period_start"),
    )
