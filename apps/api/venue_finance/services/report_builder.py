from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from venue_finance.models.company import CompanyORM
from venue_finance.models.enums import PostedExpenseType, PostedIncomeType, ReportSource, ReportType
from venue_finance.models.financial_report import FinancialReportORM
from venue_finance.services.business_calendar import (
    BusinessCalendarConfig,
    as_aware,
    calendar_day_bounds,
    calendar_timezone,
)
from venue_finance.services.events import money
from venue_finance.services.expense_totals import ExpenseTotals
from venue_finance.services.revenue import RevenueTotals
from venue_finance.services.errors import PersistenceFailure

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

_POSTED_EXPENSE_FIELD: dict[PostedExpenseType, str] = {
    PostedExpenseType.INVENTORY: "inventory_cost",
    PostedExpenseType.MAINTENANCE: "maintenance_cost",
    PostedExpenseType.STAFF: "staff_cost",
    PostedExpenseType.UTILITY: "utility_cost",
    PostedExpenseType.OTHER: "other_expenses",
}

_POSTED_INCOME_FIELD: dict[PostedIncomeType, str] = {
    PostedIncomeType.SALES: "sales_income",
    PostedIncomeType.TABLE_RENT: "table_rent_income",
    PostedIncomeType.OTHER: "other_income",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _utc(ts: datetime) -> datetime:
    return as_aware(ts).astimezone(timezone.utc)


def to_money(value: Any) -> Decimal:
    """Two-decimal form, rounded half up."""
    return money(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ReportFigures:
    """Money fields of a report in persisted (2-decimal) form.

    Components are rounded once; totals are derived from the rounded
    components so the report identities hold to the cent.
    """

    sales_income: Decimal
    table_rent_income: Decimal
    other_income: Decimal
    inventory_cost: Decimal
    maintenance_cost: Decimal
    staff_cost: Decimal
    utility_cost: Decimal
    other_expenses: Decimal

    @classmethod
    def from_totals(cls, revenue: RevenueTotals, expenses: ExpenseTotals) -> "ReportFigures":
        return cls(
            sales_income=to_money(revenue.sales_income),
            table_rent_income=to_money(revenue.table_rent_income),
            other_income=to_money(revenue.other_income),
            inventory_cost=to_money(expenses.inventory_cost),
            maintenance_cost=to_money(expenses.maintenance_cost),
            staff_cost=to_money(expenses.staff_cost),
            utility_cost=to_money(expenses.utility_cost),
            other_expenses=to_money(expenses.other_expenses),
        )

    @classmethod
    def zero(cls) -> "ReportFigures":
        return cls.from_totals(RevenueTotals(), ExpenseTotals())

    @property
    def total_income(self) -> Decimal:
        return self.sales_income + self.table_rent_income + self.other_income

    @property
    def total_expense(self) -> Decimal:
        return (
            self.inventory_cost
            + self.maintenance_cost
            + self.staff_cost
            + self.utility_cost
            + self.other_expenses
        )

    @property
    def net_profit(self) -> Decimal:
        return self.total_income - self.total_expense

    def as_columns(self) -> dict[str, Decimal]:
        cols = asdict(self)
        cols["total_income"] = self.total_income
        cols["total_expense"] = self.total_expense
        cols["net_profit"] = self.net_profit
        return cols


def report_name(report_type: ReportType, start: date, end: date) -> str:
    if report_type is ReportType.DAILY:
        return f"Daily report {start.isoformat()}"
    return f"Custom report {start.isoformat()} - {end.isoformat()}"


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Financial report %s failed; rolled back", action)
        raise PersistenceFailure(f"Could not persist financial report ({action})") from e


# ============================================================
# Generate policy
# ============================================================

def create_generated_report(
    db: Session,
    *,
    company_id: UUID,
    report_type: ReportType,
    name: str,
    period_start: datetime,
    period_end: datetime,
    figures: ReportFigures,
    generated_by_id: Optional[UUID],
) -> FinancialReportORM:
    """Insert a new report row. Existing rows for the same period are never touched."""
    report = FinancialReportORM(
        id=uuid4(),
        company_id=company_id,
        name=name,
        report_type=report_type.value,
        source=ReportSource.GENERATED.value,
        period_start=_utc(period_start),
        period_end=_utc(period_end),
        generated_at=_utcnow(),
        generated_by_id=generated_by_id,
        **figures.as_columns(),
    )
    db.add(report)
    _commit(db, "generate")
    db.refresh(report)

    logger.info(
        "Generated %s report %s for company %s: income=%s expense=%s net=%s",
        report_type.value,
        report.id,
        company_id,
        figures.total_income,
        figures.total_expense,
        figures.net_profit,
    )
    return report


# ============================================================
# Posting policy (manual income / expense entries)
# ============================================================

def _post_to_daily_report(
    db: Session,
    *,
    company_id: UUID,
    column: str,
    total_column: str,
    amount: Decimal,
    on_date: date,
    config: Optional[BusinessCalendarConfig],
    generated_by_id: Optional[UUID],
) -> tuple[FinancialReportORM, bool]:
    """Find-or-create the company's POSTED DAILY report for ``on_date`` and add ``amount``.

    ``column`` is an income or expense field, ``total_column`` its total.
    Income raises net profit, expense lowers it. The company row is locked
    first so concurrent postings for one company are applied one after another.
    """
    posted = to_money(amount)
    if posted <= 0:
        raise ValueError("Posted amount must be positive")

    day = calendar_day_bounds(on_date, calendar_timezone(config))
    signed = posted if total_column == "total_income" else -posted

    try:
        db.execute(select(CompanyORM.id).where(CompanyORM.id == company_id).with_for_update())

        report = (
            db.execute(
                select(FinancialReportORM)
                .where(
                    FinancialReportORM.company_id == company_id,
                    FinancialReportORM.report_type == ReportType.DAILY.value,
                    FinancialReportORM.source == ReportSource.POSTED.value,
                    FinancialReportORM.period_start <= _utc(day.end),
                    FinancialReportORM.period_end >= _utc(day.start),
                )
                .order_by(FinancialReportORM.generated_at.asc())
                .limit(1)
                .with_for_update()
            )
            .scalars()
            .first()
        )

        created = report is None
        if created:
            figures = replace(ReportFigures.zero(), **{column: posted})
            report = FinancialReportORM(
                id=uuid4(),
                company_id=company_id,
                name=report_name(ReportType.DAILY, on_date, on_date),
                report_type=ReportType.DAILY.value,
                source=ReportSource.POSTED.value,
                period_start=_utc(day.start),
                period_end=_utc(day.end),
                generated_at=_utcnow(),
                generated_by_id=generated_by_id,
                **figures.as_columns(),
            )
            db.add(report)
        else:
            setattr(report, column, to_money(getattr(report, column)) + posted)
            setattr(report, total_column, to_money(getattr(report, total_column)) + posted)
            report.net_profit = to_money(report.net_profit) + signed

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Posting to %s failed for company %s; rolled back", column, company_id)
        raise PersistenceFailure(f"Could not persist posted {column}") from e

    db.refresh(report)
    return report, created


def post_expense(
    db: Session,
    *,
    company_id: UUID,
    expense_type: PostedExpenseType,
    amount: Decimal,
    on_date: date,
    config: Optional[BusinessCalendarConfig],
    generated_by_id: Optional[UUID],
    description: Optional[str] = None,
) -> tuple[FinancialReportORM, bool]:
    """Add one expense to the posted DAILY report for ``on_date``; returns ``(report, created)``."""
    report, created = _post_to_daily_report(
        db,
        company_id=company_id,
        column=_POSTED_EXPENSE_FIELD[expense_type],
        total_column="total_expense",
        amount=amount,
        on_date=on_date,
        config=config,
        generated_by_id=generated_by_id,
    )
    logger.info(
        "Posted %s expense %s (%s) to report %s (company %s, created=%s)",
        expense_type.value,
        to_money(amount),
        description or "-",
        report.id,
        company_id,
        created,
    )
    return report, created


def post_income(
    db: Session,
    *,
    company_id: UUID,
    income_type: PostedIncomeType,
    amount: Decimal,
    on_date: date,
    config: Optional[BusinessCalendarConfig],
    generated_by_id: Optional[UUID],
    description: Optional[str] = None,
) -> tuple[FinancialReportORM, bool]:
    """Add one income entry to the posted DAILY report for ``on_date``; returns ``(report, created)``."""
    report, created = _post_to_daily_report(
        db,
        company_id=company_id,
        column=_POSTED_INCOME_FIELD[income_type],
        total_column="total_income",
        amount=amount,
        on_date=on_date,
        config=config,
        generated_by_id=generated_by_id,
    )
    logger.info(
        "Posted %s income %s (%s) to report %s (company %s, created=%s)",
        income_type.value,
        to_money(amount),
        description or "-",
        report.id,
        company_id,
        created,
    )
    return report, created
