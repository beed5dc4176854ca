from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from venue_finance.core.config import settings
from venue_finance.models.company import CompanyORM
from venue_finance.models.enums import ReportType
from venue_finance.models.financial_report import FinancialReportORM
from venue_finance.services.business_calendar import (
    BusinessCalendarConfig,
    TimeWindow,
    business_window,
    calendar_day_bounds,
    calendar_range_bounds,
    calendar_timezone,
    load_calendar_config,
    to_local,
)
from venue_finance.services.errors import InvalidTimeRange
from venue_finance.services.event_sources import load_events
from venue_finance.services.expense_totals import ExpenseTotals, aggregate_expenses
from venue_finance.services.report_builder import (
    ReportFigures,
    create_generated_report,
    report_name,
)
from venue_finance.services.revenue import RevenueTotals, aggregate_revenue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportWindows:
    """Windows used by one report computation.

    - period: stored on the report (business hours for DAILY, caller bounds for CUSTOM)
    - income: fetch/match bounds for sales and sessions
    - expense: calendar-day bounds for every expense source
    - business_date: DAILY only; income events must resolve to this date
    """

    period: TimeWindow
    income: TimeWindow
    expense: TimeWindow
    business_date: Optional[date] = None


@dataclass(frozen=True)
class ReportComputation:
    company_id: UUID
    report_type: ReportType
    name: str
    windows: ReportWindows
    revenue: RevenueTotals
    expenses: ExpenseTotals
    figures: ReportFigures


def localize(ts: datetime, config: Optional[BusinessCalendarConfig]) -> datetime:
    """Caller-supplied bounds without a timezone are venue wall-clock times."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=calendar_timezone(config))
    return to_local(ts, config)


def plan_windows(
    report_type: ReportType,
    start: datetime,
    end: Optional[datetime],
    config: Optional[BusinessCalendarConfig],
) -> ReportWindows:
    tz = calendar_timezone(config)

    if report_type is ReportType.DAILY:
        day = localize(start, config).date()
        period = business_window(day, config)
        calendar_day = calendar_day_bounds(day, tz)
        return ReportWindows(
            period=period,
            # events resolving to ``day`` lie in its opening window or on its calendar date
            income=calendar_day.union(period),
            expense=calendar_day,
            business_date=day,
        )

    if end is None:
        raise InvalidTimeRange("end_date is required for CUSTOM reports")
    period = TimeWindow(start=localize(start, config), end=localize(end, config))
    return ReportWindows(
        period=period,
        income=period,
        expense=calendar_range_bounds(period.start.date(), period.end.date(), tz),
    )


def compute_report(
    db: Session,
    *,
    company: CompanyORM,
    report_type: ReportType,
    start: datetime,
    end: Optional[datetime] = None,
) -> ReportComputation:
    config = load_calendar_config(company, default_timezone=settings.DEFAULT_TIMEZONE)
    windows = plan_windows(report_type, start, end, config)
    logger.debug(
        "Computing %s report for company %s: income=%s..%s expense=%s..%s",
        report_type.value,
        company.id,
        windows.income.start.isoformat(),
        windows.income.end.isoformat(),
        windows.expense.start.isoformat(),
        windows.expense.end.isoformat(),
    )

    batch = load_events(db, company.id, income_window=windows.income, expense_window=windows.expense)

    revenue = aggregate_revenue(
        batch.sales,
        batch.sessions,
        config=config,
        window=windows.income,
        business_date=windows.business_date,
    )
    expenses = aggregate_expenses(
        batch.movements,
        batch.maintenance,
        batch.expenses,
        window=windows.expense,
        tz=calendar_timezone(config),
    )

    local_start = to_local(windows.period.start, config).date()
    local_end = to_local(windows.period.end, config).date()
    if windows.business_date is not None:
        local_start = local_end = windows.business_date

    return ReportComputation(
        company_id=company.id,
        report_type=report_type,
        name=report_name(report_type, local_start, local_end),
        windows=windows,
        revenue=revenue,
        expenses=expenses,
        figures=ReportFigures.from_totals(revenue, expenses),
    )


def generate_financial_report(
    db: Session,
    *,
    company: CompanyORM,
    report_type: ReportType,
    start: datetime,
    end: Optional[datetime],
    generated_by_id: Optional[UUID],
) -> FinancialReportORM:
    computation = compute_report(db, company=company, report_type=report_type, start=start, end=end)
    return create_generated_report(
        db,
        company_id=computation.company_id,
        report_type=computation.report_type,
        name=computation.name,
        period_start=computation.windows.period.start,
        period_end=computation.windows.period.end,
        figures=computation.figures,
        generated_by_id=generated_by_id,
    )
