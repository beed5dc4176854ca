import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal

from venue_finance.models.enums import PaymentStatus, SessionStatus
from venue_finance.services.business_calendar import (
    BusinessCalendarConfig,
    CalendarMode,
    DayHours,
    GeneralHours,
    TimeWindow,
    Weekday,
    calendar_day_bounds,
)
from venue_finance.services.events import EventKind, SaleEvent, TableSessionEvent
from venue_finance.services.revenue import aggregate_revenue, revenue_events, sale_to_event

UTC = timezone.utc


def sale(amount, at, *, session_id=None, status=PaymentStatus.PAID.value):
    return SaleEvent(
        id=uuid.uuid4(),
        amount=None if amount is None else Decimal(amount),
        created_at=at,
        table_session_id=session_id,
        payment_status=status,
    )


def session(total, ended, *, status=SessionStatus.COMPLETED.value):
    return TableSessionEvent(
        id=uuid.uuid4(),
        total_cost=None if total is None else Decimal(total),
        started_at=datetime(2024, 5, 1, 8, 0, tzinfo=UTC),
        ended_at=ended,
        status=status,
    )


def _day_hours(start, end):
    return BusinessCalendarConfig(
        mode=CalendarMode.GENERAL,
        general_hours=GeneralHours(start=start, end=end),
    )


def test_linked_sale_is_not_counted_twice():
    s = session("60.00", datetime(2024, 5, 1, 20, 0, tzinfo=UTC))
    linked = sale("25.00", datetime(2024, 5, 1, 19, 0, tzinfo=UTC), session_id=s.id)

    totals = aggregate_revenue(
        [linked],
        [s],
        config=None,
        window=calendar_day_bounds(date(2024, 5, 1), UTC),
    )
    assert totals.sales_income == Decimal("0")
    assert totals.table_rent_income == Decimal("60.00")


def test_linked_sale_never_becomes_an_event():
    at = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    assert sale_to_event(sale("25.00", at, session_id=uuid.uuid4())) is None

    standalone = sale_to_event(sale("25.00", at))
    assert standalone.kind is EventKind.SALE
    assert standalone.amount == Decimal("25.00")


def test_only_paid_sales_and_completed_sessions():
    at = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    events = revenue_events(
        [sale("10", at), sale("99", at, status=PaymentStatus.PENDING.value)],
        [
            session("5", at),
            session("77", at, status=SessionStatus.ACTIVE.value),
            session("88", None),
        ],
    )
    assert sorted((e.kind, e.amount) for e in events) == [
        (EventKind.SALE, Decimal("10")),
        (EventKind.TABLE_RENT, Decimal("5")),
    ]


def test_missing_amounts_count_as_zero():
    at = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    totals = aggregate_revenue(
        [sale(None, at)],
        [session(None, at)],
        config=None,
        window=calendar_day_bounds(date(2024, 5, 1), UTC),
    )
    assert totals.total_income == Decimal("0")


def test_daily_matching_uses_each_events_business_day():
    # the session ends after closing time but on the same date
    config = _day_hours(time(9, 0), time(23, 0))
    day = date(2024, 5, 1)
    totals = aggregate_revenue(
        [sale("40.00", datetime(2024, 5, 1, 22, 50, tzinfo=UTC))],
        [session("60.00", datetime(2024, 5, 1, 23, 10, tzinfo=UTC))],
        config=config,
        window=calendar_day_bounds(day, UTC),
        business_date=day,
    )
    assert totals.sales_income == Decimal("40.00")
    assert totals.table_rent_income == Decimal("60.00")
    assert totals.total_income == Decimal("100.00")
    assert [b.calendar_date for b in totals.buckets] == [day]


def test_overnight_events_bucket_to_opening_day():
    config = BusinessCalendarConfig(
        mode=CalendarMode.PER_WEEKDAY,
        per_weekday_hours={Weekday.MON: DayHours(start=time(20, 0), end=time(2, 0))},
    )
    monday = date(2024, 5, 6)
    window = TimeWindow(
        start=datetime(2024, 5, 6, tzinfo=UTC),
        end=datetime(2024, 5, 7, 23, 59, tzinfo=UTC),
    )
    sales = [
        sale("10", datetime(2024, 5, 6, 21, 0, tzinfo=UTC)),
        sale("20", datetime(2024, 5, 7, 1, 30, tzinfo=UTC)),
        sale("40", datetime(2024, 5, 7, 12, 0, tzinfo=UTC)),
    ]

    monday_only = aggregate_revenue(sales, [], config=config, window=window, business_date=monday)
    assert monday_only.sales_income == Decimal("30")

    everything = aggregate_revenue(sales, [], config=config, window=window)
    assert everything.sales_income == Decimal("70")
    by_day = {b.calendar_date: b.total(EventKind.SALE) for b in everything.buckets}
    assert by_day == {monday: Decimal("30"), date(2024, 5, 7): Decimal("40")}


def test_events_outside_window_are_ignored():
    day = date(2024, 5, 1)
    totals = aggregate_revenue(
        [sale("10", datetime(2024, 5, 2, 0, 0, tzinfo=UTC))],
        [session("10", datetime(2024, 4, 30, 23, 59, tzinfo=UTC))],
        config=None,
        window=calendar_day_bounds(day, UTC),
    )
    assert totals.total_income == Decimal("0")
