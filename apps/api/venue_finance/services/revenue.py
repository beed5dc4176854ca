from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from venue_finance.models.enums import PaymentStatus, SessionStatus
from venue_finance.services.business_calendar import (
    BusinessCalendarConfig,
    TimeWindow,
    assign_business_day,
)
from venue_finance.services.events import (
    ZERO,
    EventKind,
    FinancialEvent,
    SaleEvent,
    TableSessionEvent,
    money,
)


@dataclass
class BusinessDayBucket:
    calendar_date: date
    totals_by_category: dict[EventKind, Decimal] = field(default_factory=dict)

    def add(self, kind: EventKind, amount: Decimal) -> None:
        self.totals_by_category[kind] = self.totals_by_category.get(kind, ZERO) + amount

    def total(self, kind: EventKind) -> Decimal:
        return self.totals_by_category.get(kind, ZERO)


@dataclass(frozen=True)
class RevenueTotals:
    sales_income: Decimal = ZERO
    table_rent_income: Decimal = ZERO
    other_income: Decimal = ZERO
    buckets: tuple[BusinessDayBucket, ...] = ()

    @property
    def total_income(self) -> Decimal:
        return self.sales_income + self.table_rent_income + self.other_income


def sale_to_event(sale: SaleEvent) -> Optional[FinancialEvent]:
    if sale.payment_status != PaymentStatus.PAID:
        return None
    # session-linked charges are already part of the session's total cost
    if sale.table_session_id is not None:
        return None
    return FinancialEvent(
        kind=EventKind.SALE,
        timestamp=sale.created_at,
        amount=money(sale.amount),
        source_id=sale.id,
    )


def session_to_event(session: TableSessionEvent) -> Optional[FinancialEvent]:
    if session.status != SessionStatus.COMPLETED or session.ended_at is None:
        return None
    return FinancialEvent(
        kind=EventKind.TABLE_RENT,
        timestamp=session.ended_at,
        amount=money(session.total_cost),
        source_id=session.id,
    )


def revenue_events(
    sales: Iterable[SaleEvent],
    sessions: Iterable[TableSessionEvent],
) -> list[FinancialEvent]:
    events: list[FinancialEvent] = []
    for sale in sales:
        ev = sale_to_event(sale)
        if ev is not None:
            events.append(ev)
    for session in sessions:
        ev = session_to_event(session)
        if ev is not None:
            events.append(ev)
    return events


def aggregate_revenue(
    sales: Iterable[SaleEvent],
    sessions: Iterable[TableSessionEvent],
    *,
    config: Optional[BusinessCalendarConfig],
    window: TimeWindow,
    business_date: Optional[date] = None,
) -> RevenueTotals:
    """Sum standalone sales and completed table sessions.

    ``window`` bounds the event timestamps. With ``business_date`` set, only
    events whose own resolved business day is that date are counted.
    """
    buckets: dict[date, BusinessDayBucket] = {}
    totals = {EventKind.SALE: ZERO, EventKind.TABLE_RENT: ZERO}

    for event in revenue_events(sales, sessions):
        if not window.contains(event.timestamp):
            continue
        day = assign_business_day(event.timestamp, config)
        if business_date is not None and day != business_date:
            continue

        bucket = buckets.get(day)
        if bucket is None:
            bucket = buckets[day] = BusinessDayBucket(calendar_date=day)
        bucket.add(event.kind, event.amount)
        totals[event.kind] += event.amount

    return RevenueTotals(
        sales_income=totals[EventKind.SALE],
        table_rent_income=totals[EventKind.TABLE_RENT],
        buckets=tuple(buckets[d] for d in sorted(buckets)),
    )
