from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from venue_finance.models.enums import ExpenseCategory

class _ExpenseFields(BaseModel):
    @field_validator("description", check_fields=False)
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("description must not be blank")
        return v


class ExpenseCreateIn(_ExpenseFields):
    company_id: Optional[UUID] = None
    expense_date: date
    category: ExpenseCategory
    description: str = Field(max_length=255)
    amount: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    notes: Optional[str] = None


class ExpenseUpdateIn(_ExpenseFields):
    """Partial update; only the fields sent are applied."""

    expense_date: Optional[date] = None
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = Field(default=None, max_length=255)
    amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    notes: Optional[str] = None


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    expense_date: date
    category: ExpenseCategory
    description: str
    amount: Decimal
    notes: Optional[str] = None
    created_by_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


class ExpenseListOut(BaseModel):
    items: List[ExpenseOut]
    total: int
    amount_total: Decimal
