from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from venue_finance.core.config import settings
from venue_finance.models.company import CompanyORM
from venue_finance.services.business_calendar import (
    BusinessCalendarConfig,
    TimeWindow,
    Weekday,
    assign_business_day,
    business_window,
    calendar_range_bounds,
    calendar_timezone,
    load_calendar_config,
    to_local,
)
from venue_finance.services.event_sources import fetch_sales, fetch_table_sessions
from venue_finance.services.events import ZERO, EventKind, SaleEvent, TableSessionEvent
from venue_finance.services.revenue import revenue_events


@dataclass
class SalesSummaryPoint:
    date: date
    date_label: str
    pos_amount: Decimal = ZERO
    table_amount: Decimal = ZERO


def date_label(day: date) -> str:
    # "Wed 01/05"
    return f"{Weekday.of(day).value.title()} {day.day:02d}/{day.month:02d}"


def seed_series(end_day: date, days: int) -> list[SalesSummaryPoint]:
    if days < 1:
        raise ValueError("days must be >= 1")
    first = end_day - timedelta(days=days - 1)
    return [
        SalesSummaryPoint(date=d, date_label=date_label(d))
        for d in (first + timedelta(days=i) for i in range(days))
    ]


def fetch_window(end_day: date, days: int, config: Optional[BusinessCalendarConfig]) -> TimeWindow:
    """Calendar days of the series plus the last day's overnight tail."""
    first = end_day - timedelta(days=days - 1)
    calendar = calendar_range_bounds(first, end_day, calendar_timezone(config))
    return calendar.union(business_window(end_day, config))


def build_sales_summary(
    sales: Iterable[SaleEvent],
    sessions: Iterable[TableSessionEvent],
    *,
    config: Optional[BusinessCalendarConfig],
    end_day: date,
    days: int,
) -> list[SalesSummaryPoint]:
    """Bucket every revenue event by its own business day.

    Events resolving to a day outside the series are dropped.
    """
    series = seed_series(end_day, days)
    by_date = {p.date: p for p in series}

    for event in revenue_events(sales, sessions):
        point = by_date.get(assign_business_day(event.timestamp, config))
        if point is None:
            continue
        if event.kind is EventKind.SALE:
            point.pos_amount += event.amount
        else:
            point.table_amount += event.amount

    return series


def sales_summary(
    db: Session,
    *,
    company: CompanyORM,
    days: int,
    end_day: Optional[date] = None,
) -> list[SalesSummaryPoint]:
    config = load_calendar_config(company, default_timezone=settings.DEFAULT_TIMEZONE)
    if end_day is None:
        end_day = to_local(datetime.now(timezone.utc), config).date()

    window = fetch_window(end_day, days, config)
    return build_sales_summary(
        fetch_sales(db, company.id, window),
        fetch_table_sessions(db, company.id, window),
        config=config,
        end_day=end_day,
        days=days,
    )
