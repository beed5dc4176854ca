# venue_finance/models/company.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID

from venue_finance.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CompanyORM(Base):
    """
    Venue (tenant) and its opening-hours settings.

    - business_hours_start / business_hours_end: "HH:MM", 24h. end < start crosses midnight
    - operating_days: JSON list of weekday codes, e.g. ["MON","TUE"]
    - individual_day_hours: JSON object {"MON": {"start","end","enabled"}, ...}
    - use_individual_hours: per-weekday hours take precedence when true
    """

    __tablename__ = "companies"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    name = Column(String(255), nullable=False)

    business_hours_start = Column(String(5), nullable=True)
    business_hours_end = Column(String(5), nullable=True)
    timezone = Column(String(64), nullable=True)
    operating_days = Column(Text, nullable=True)
    individual_day_hours = Column(Text, nullable=True)
    use_individual_hours = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
