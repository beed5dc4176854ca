from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from venue_finance.core.query import LimitQuery, OffsetQuery, utc_day_bounds
from venue_finance.db.session import get_db
from venue_finance.dependencies.permissions import REPORT_ROLES, load_company, require_roles
from venue_finance.models.enums import ReportSource, ReportType
from venue_finance.models.financial_report import FinancialReportORM
from venue_finance.models.user import User
from venue_finance.schemas.common import Page
from venue_finance.schemas.financial_reports import (
    FinancialReportOut,
    FinancialReportPreviewOut,
    ReportGenerateIn,
)
from venue_finance.services.financial_reports import compute_report, generate_financial_report

logger = logging.getLogger(__name__)

router = APIRouter(tags=["financial-reports"])


def _preview_params(
    company_id: Optional[UUID] = Query(default=None),
    report_type: ReportType = Query(default=ReportType.DAILY),
    start_date: str = Query(..., description="YYYY-MM-DD or ISO datetime"),
    end_date: Optional[str] = Query(default=None, description="required for CUSTOM"),
) -> ReportGenerateIn:
    try:
        return ReportGenerateIn(
            company_id=company_id,
            report_type=report_type,
            start_date=start_date,
            end_date=end_date,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False)) from e


def _get_report(db: Session, user: User, report_id: UUID, company_id: Optional[UUID]) -> FinancialReportORM:
    company = load_company(db, user, company_id)
    report = db.get(FinancialReportORM, report_id)
    if report is None or report.company_id != company.id:
        raise HTTPException(status_code=404, detail="Not found")
    return report


# ============================================================
# endpoints
# ============================================================

@router.post("/financial-reports/generate", response_model=FinancialReportOut, status_code=201)
def generate_report(
    body: ReportGenerateIn,
    user: User = Depends(require_roles(*REPORT_ROLES)),
    db: Session = Depends(get_db),
) -> FinancialReportOut:
    company = load_company(db, user, body.company_id)
    return generate_financial_report(
        db,
        company=company,
        report_type=body.report_type,
        start=body.start_date,
        end=body.end_date,
        generated_by_id=user.id,
    )


@router.get("/financial-reports/data", response_model=FinancialReportPreviewOut)
def preview_report(
    params: ReportGenerateIn = Depends(_preview_params),
    user: User = Depends(require_roles(*REPORT_ROLES)),
    db: Session = Depends(get_db),
) -> FinancialReportPreviewOut:
    """Compute report figures for a period without saving them."""
    company = load_company(db, user, params.company_id)
    result = compute_report(
        db,
        company=company,
        report_type=params.report_type,
        start=params.start_date,
        end=params.end_date,
    )
    return FinancialReportPreviewOut(
        company_id=result.company_id,
        name=result.name,
        report_type=result.report_type,
        period_start=result.windows.period.start,
        period_end=result.windows.period.end,
        **result.figures.as_columns(),
    )


@router.get("/financial-reports", response_model=Page[FinancialReportOut])
def list_reports(
    company_id: Optional[UUID] = Query(default=None),
    report_type: Optional[ReportType] = Query(default=None),
    source: Optional[ReportSource] = Query(default=None),
    start: Optional[str] = Query(default=None, description="YYYY-MM-DD, period overlaps from"),
    end: Optional[str] = Query(default=None, description="YYYY-MM-DD, period overlaps until"),
    limit: int = LimitQuery,
    offset: int = OffsetQuery,
    user: User = Depends(require_roles(*REPORT_ROLES)),
    db: Session = Depends(get_db),
) -> Page[FinancialReportOut]:
    company = load_company(db, user, company_id)

    cond = [FinancialReportORM.company_id == company.id]
    if report_type is not None:
        cond.append(FinancialReportORM.report_type == report_type.value)
    if source is not None:
        cond.append(FinancialReportORM.source == source.value)
    lo, hi = utc_day_bounds(start, end)
    if lo is not None:
        cond.append(FinancialReportORM.period_end >= lo)
    if hi is not None:
        cond.append(FinancialReportORM.period_start < hi)

    items = (
        db.execute(
            select(FinancialReportORM)
            .where(and_(*cond))
            .order_by(FinancialReportORM.period_start.desc(), FinancialReportORM.generated_at.desc())
            .limit(limit)
            .offset(offset)
        )
        .scalars()
        .all()
    )
    total = db.execute(select(func.count()).select_from(FinancialReportORM).where(and_(*cond))).scalar_one()

    return Page[FinancialReportOut].build(
        [FinancialReportOut.model_validate(r) for r in items],
        limit=limit,
        offset=offset,
        total=int(total or 0),
    )


@router.get("/financial-reports/{report_id}", response_model=FinancialReportOut)
def get_report(
    report_id: UUID,
    company_id: Optional[UUID] = Query(default=None),
    user: User = Depends(require_roles(*REPORT_ROLES)),
    db: Session = Depends(get_db),
) -> FinancialReportOut:
    return _get_report(db, user, report_id, company_id)


@router.delete("/financial-reports/{report_id}", status_code=204)
def delete_report(
    report_id: UUID,
    company_id: Optional[UUID] = Query(default=None),
    user: User = Depends(require_roles(*REPORT_ROLES)),
    db: Session = Depends(get_db),
) -> Response:
    report = _get_report(db, user, report_id, company_id)
    db.delete(report)
    db.commit()
    logger.info("Deleted financial report %s (company %s) by user %s", report_id, report.company_id, user.id)
    return Response(status_code=204)
