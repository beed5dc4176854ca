from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from venue_finance.core.config import settings
from venue_finance.db.session import get_db
from venue_finance.dependencies.auth import get_current_user
from venue_finance.dependencies.permissions import load_company
from venue_finance.models.user import User
from venue_finance.schemas.sales_summary import SalesSummaryOut, SalesSummaryPointOut
from venue_finance.services.report_builder import to_money
from venue_finance.services.sales_summary import sales_summary

router = APIRouter(tags=["reports"])


# ============================================================
# Sales Summary (dashboard chart)
# ============================================================

@router.get("/reports/sales-summary", response_model=SalesSummaryOut)
def get_sales_summary(
    company_id: Optional[UUID] = Query(default=None),
    days: int = Query(7, ge=1),
    end_date: Optional[date] = Query(default=None, description="YYYY-MM-DD, defaults to today (venue time)"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SalesSummaryOut:
    """POS and table revenue per business day, oldest first."""
    if days > settings.SALES_SUMMARY_MAX_DAYS:
        raise HTTPException(status_code=400, detail=f"days must be <= {settings.SALES_SUMMARY_MAX_DAYS}")

    company = load_company(db, user, company_id)
    points = sales_summary(db, company=company, days=days, end_day=end_date)

    return SalesSummaryOut(
        company_id=company.id,
        days=days,
        end_date=points[-1].date,
        points=[
            SalesSummaryPointOut(
                date=p.date,
                date_label=p.date_label,
                pos_amount=to_money(p.pos_amount),
                table_amount=to_money(p.table_amount),
            )
            for p in points
        ],
    )
