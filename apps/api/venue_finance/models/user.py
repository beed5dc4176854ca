# venue_finance/models/user.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID

from venue_finance.models.base import Base
from venue_finance.models.enums import UserRole


class User(Base):
    """API caller. Only identity, tenancy and role are kept here."""

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    is_active = Column(Boolean, default=True)

    # null for SUPERADMIN, who may act on any company
    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    role = Column(String(32), nullable=False, default=UserRole.ADMIN.value)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    @property
    def is_superadmin(self) -> bool:
        return self.role == UserRole.SUPERADMIN.value
