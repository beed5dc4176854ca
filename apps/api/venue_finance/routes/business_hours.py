from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from venue_finance.core.config import settings
from venue_finance.db.session import get_db
from venue_finance.dependencies.auth import get_current_user
from venue_finance.dependencies.permissions import load_company, require_roles
from venue_finance.models.company import CompanyORM
from venue_finance.models.enums import UserRole
from venue_finance.models.user import User
from venue_finance.schemas.business_hours import (
    BusinessDayResolveOut,
    BusinessHoursIn,
    BusinessHoursOut,
    DayHoursIn,
)
from venue_finance.services.business_calendar import (
    DayHours,
    Weekday,
    business_window,
    format_hhmm,
    load_calendar_config,
    parse_hhmm,
    parse_individual_day_hours,
    parse_operating_days,
    stringify_individual_day_hours,
    stringify_operating_days,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["business-hours"])


def _hours_out(company: CompanyORM) -> BusinessHoursOut:
    individual = parse_individual_day_hours(company.individual_day_hours)
    return BusinessHoursOut(
        company_id=company.id,
        business_hours_start=company.business_hours_start,
        business_hours_end=company.business_hours_end,
        timezone=company.timezone,
        operating_days=[d for d in Weekday if d in parse_operating_days(company.operating_days)],
        individual_day_hours={
            day: DayHoursIn(start=format_hhmm(h.start), end=format_hhmm(h.end), enabled=h.enabled)
            for day, h in individual.items()
        },
        use_individual_hours=bool(company.use_individual_hours),
    )


@router.get("/companies/{company_id}/business-hours", response_model=BusinessHoursOut)
def get_business_hours(
    company_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BusinessHoursOut:
    return _hours_out(load_company(db, user, company_id))


@router.put("/companies/{company_id}/business-hours", response_model=BusinessHoursOut)
def update_business_hours(
    company_id: UUID,
    body: BusinessHoursIn,
    user: User = Depends(require_roles(UserRole.SUPERADMIN.value, UserRole.ADMIN.value)),
    db: Session = Depends(get_db),
) -> BusinessHoursOut:
    company = load_company(db, user, company_id)

    if body.business_hours_start is not None:
        company.business_hours_start = body.business_hours_start
    if body.business_hours_end is not None:
        company.business_hours_end = body.business_hours_end
    if body.timezone is not None:
        company.timezone = body.timezone
    if body.operating_days is not None:
        company.operating_days = stringify_operating_days(body.operating_days)
    if body.individual_day_hours is not None:
        company.individual_day_hours = stringify_individual_day_hours(
            {
                day: DayHours(start=parse_hhmm(h.start), end=parse_hhmm(h.end), enabled=h.enabled)
                for day, h in body.individual_day_hours.items()
            }
        )
    if body.use_individual_hours is not None:
        company.use_individual_hours = body.use_individual_hours

    # reject combinations the resolver cannot use before they are stored
    load_calendar_config(company, default_timezone=settings.DEFAULT_TIMEZONE)

    db.add(company)
    db.commit()
    db.refresh(company)
    logger.info("Business hours updated for company %s by user %s", company.id, user.id)
    return _hours_out(company)


@router.get("/business-hours/resolve", response_model=BusinessDayResolveOut)
def resolve_business_day(
    company_id: Optional[UUID] = Query(default=None),
    on_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BusinessDayResolveOut:
    """Show the business window a date resolves to under the stored hours."""
    company = load_company(db, user, company_id)
    config = load_calendar_config(company, default_timezone=settings.DEFAULT_TIMEZONE)
    weekday = Weekday.of(on_date)
    window = business_window(on_date, config)

    return BusinessDayResolveOut(
        company_id=company.id,
        date=on_date,
        weekday=weekday,
        configured=config is not None,
        open=config is not None and config.hours_for(weekday) is not None,
        timezone=config.timezone if config is not None else "UTC",
        start=window.start,
        end=window.end,
    )
