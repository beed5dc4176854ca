from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from venue_finance.models.enums import PostedExpenseType, PostedIncomeType, ReportType


def _date_only(value: Any) -> Optional[date]:
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return None


# last instant of a day, matching the millisecond resolution of business windows
END_OF_DAY = time(23, 59, 59, 999000)


def parse_report_bound(value: Any, *, inclusive_end: bool = False) -> Any:
    """Accept ``YYYY-MM-DD`` as venue wall clock.

    A start date means midnight of that day; an end date covers the whole day.
    """
    day = _date_only(value)
    if day is None:
        return value
    return datetime.combine(day, END_OF_DAY if inclusive_end else time.min)


def _utc_if_naive(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive values; stored timestamps are UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ============================================================
# Input
# ============================================================

class ReportGenerateIn(BaseModel):
    company_id: Optional[UUID] = None
    report_type: ReportType = ReportType.DAILY

    # DAILY: only the date part of start_date is used
    start_date: datetime
    end_date: Optional[datetime] = None

    @field_validator("start_date", mode="before")
    @classmethod
    def _start(cls, v: Any) -> Any:
        return parse_report_bound(v)

    @field_validator("end_date", mode="before")
    @classmethod
    def _end(cls, v: Any) -> Any:
        return parse_report_bound(v, inclusive_end=True)


class _PostIn(BaseModel):
    company_id: Optional[UUID] = None
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=255)

    @field_validator("description")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description must not be blank")
        return v


class ExpensePostIn(_PostIn):
    expense_type: PostedExpenseType
    expense_date: date = Field(..., description="YYYY-MM-DD (venue calendar date)")


class IncomePostIn(_PostIn):
    income_type: PostedIncomeType
    income_date: date = Field(..., description="YYYY-MM-DD (venue calendar date)")


# ============================================================
# Output
# ============================================================

class FinancialReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    name: str
    report_type: ReportType
    source: str

    period_start: datetime
    period_end: datetime

    sales_income: Decimal
    table_rent_income: Decimal
    other_income: Decimal
    total_income: Decimal

    inventory_cost: Decimal
    maintenance_cost: Decimal
    staff_cost: Decimal
    utility_cost: Decimal
    other_expenses: Decimal
    total_expense: Decimal

    net_profit: Decimal

    generated_at: datetime
    generated_by_id: Optional[UUID] = None

    @field_validator("period_start", "period_end", "generated_at")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return _utc_if_naive(v)


class FinancialReportPreviewOut(BaseModel):
    """Live figures for a period; nothing is persisted."""

    company_id: UUID
    name: str
    report_type: ReportType
    period_start: datetime
    period_end: datetime

    sales_income: Decimal
    table_rent_income: Decimal
    other_income: Decimal
    total_income: Decimal

    inventory_cost: Decimal
    maintenance_cost: Decimal
    staff_cost: Decimal
    utility_cost: Decimal
    other_expenses: Decimal
    total_expense: Decimal

    net_profit: Decimal


class PostedReportOut(BaseModel):
    """Report a posted entry landed on; ``created`` is false when an existing one was incremented."""

    created: bool
    report: FinancialReportOut


class ReportExpensesOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    report_type: ReportType
    source: str
    period_start: datetime
    period_end: datetime

    inventory_cost: Decimal
    maintenance_cost: Decimal
    staff_cost: Decimal
    utility_cost: Decimal
    other_expenses: Decimal
    total_expense: Decimal

    @field_validator("period_start", "period_end")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return _utc_if_naive(v)


class ReportExpensesListOut(BaseModel):
    items: List[ReportExpensesOut]
    total_expense: Decimal


class ReportIncomeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    report_type: ReportType
    source: str
    period_start: datetime
    period_end: datetime

    sales_income: Decimal
    table_rent_income: Decimal
    other_income: Decimal
    total_income: Decimal

    @field_validator("period_start", "period_end")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return _utc_if_naive(v)


class ReportIncomeListOut(BaseModel):
    items: List[ReportIncomeOut]
    total_income: Decimal
