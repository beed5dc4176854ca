"""Manual income and expense postings onto daily reports.

A posting lands on the company's POSTED daily report for the date, which is
created on first use. Generated reports are never modified here.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from venue_finance.core.config import settings
from venue_finance.core.query import utc_day_bounds
from venue_finance.db.session import get_db
from venue_finance.dependencies.permissions import REPORT_ROLES, load_company, require_roles
from venue_finance.models.enums import ReportType
from venue_finance.models.financial_report import FinancialReportORM
from venue_finance.models.user import User
from venue_finance.schemas.financial_reports import (
    ExpensePostIn,
    FinancialReportOut,
    IncomePostIn,
    PostedReportOut,
    ReportExpensesListOut,
    ReportExpensesOut,
    ReportIncomeListOut,
    ReportIncomeOut,
)
from venue_finance.services.business_calendar import load_calendar_config
from venue_finance.services.report_builder import post_expense, post_income

router = APIRouter(prefix="/financial", tags=["financial-postings"])


def _reports_oldest_first(
    db: Session,
    company_id: UUID,
    report_type: Optional[ReportType],
    start: Optional[str],
    end: Optional[str],
) -> list[FinancialReportORM]:
    cond = [FinancialReportORM.company_id == company_id]
    if report_type is not None:
        cond.append(FinancialReportORM.report_type == report_type.value)
    lo, hi = utc_day_bounds(start, end)
    if lo is not None:
        cond.append(FinancialReportORM.period_end >= lo)
    if hi is not None:
        cond.append(FinancialReportORM.period_start < hi)

    return list(
        db.scalars(
            select(FinancialReportORM)
            .where(*cond)
            .order_by(FinancialReportORM.period_start.asc(), FinancialReportORM.generated_at.asc())
        )
    )


def _posted(report: FinancialReportORM, created: bool, response: Response) -> PostedReportOut:
    # 201 only when the posting created the day's report
    if not created:
        response.status_code = 200
    return PostedReportOut(created=created, report=FinancialReportOut.model_validate(report))


@router.post("/expenses", response_model=PostedReportOut, status_code=201)
def post_financial_expense(
    body: ExpensePostIn,
    response: Response,
    user: User = Depends(require_roles(*REPORT_ROLES)),
    db: Session = Depends(get_db),
) -> PostedReportOut:
    company = load_company(db, user, body.company_id)
    report, created = post_expense(
        db,
        company_id=company.id,
        expense_type=body.expense_type,
        amount=body.amount,
        on_date=body.expense_date,
        config=load_calendar_config(company, default_timezone=settings.DEFAULT_TIMEZONE),
        generated_by_id=user.id,
        description=body.description,
    )
    return _posted(report, created, response)


@router.post("/income", response_model=PostedReportOut, status_code=201)
def post_financial_income(
    body: IncomePostIn,
    response: Response,
    user: User = Depends(require_roles(*REPORT_ROLES)),
    db: Session = Depends(get_db),
) -> PostedReportOut:
    company = load_company(db, user, body.company_id)
    report, created = post_income(
        db,
        company_id=company.id,
        income_type=body.income_type,
        amount=body.amount,
        on_date=body.income_date,
        config=load_calendar_config(company, default_timezone=settings.DEFAULT_TIMEZONE),
        generated_by_id=user.id,
        description=body.description,
    )
    return _posted(report, created, response)


@router.get("/expenses", response_model=ReportExpensesListOut)
def list_report_expenses(
    company_id: Optional[UUID] = Query(default=None),
    report_type: Optional[ReportType] = Query(default=None),
    start: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    end: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    user: User = Depends(require_roles(*REPORT_ROLES)),
    db: Session = Depends(get_db),
) -> ReportExpensesListOut:
    """Expense columns of the company's reports, oldest period first."""
    company = load_company(db, user, company_id)
    items = [ReportExpensesOut.model_validate(r) for r in _reports_oldest_first(db, company.id, report_type, start, end)]
    return ReportExpensesListOut(items=items, total_expense=sum((i.total_expense for i in items), Decimal("0")))


@router.get("/income", response_model=ReportIncomeListOut)
def list_report_income(
    company_id: Optional[UUID] = Query(default=None),
    report_type: Optional[ReportType] = Query(default=None),
    start: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    end: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    user: User = Depends(require_roles(*REPORT_ROLES)),
    db: Session = Depends(get_db),
) -> ReportIncomeListOut:
    """Income columns of the company's reports, oldest period first."""
    company = load_company(db, user, company_id)
    items = [ReportIncomeOut.model_validate(r) for r in _reports_oldest_first(db, company.id, report_type, start, end)]
    return ReportIncomeListOut(items=items, total_income=sum((i.total_income for i in items), Decimal("0")))
