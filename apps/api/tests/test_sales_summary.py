import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest

from conftest import make_company, utc
from venue_finance.models.pos import PosOrderORM
from venue_finance.models.table_session import TableSessionORM
from venue_finance.services.business_calendar import (
    BusinessCalendarConfig,
    CalendarMode,
    GeneralHours,
)
from venue_finance.services.events import SaleEvent, TableSessionEvent
from venue_finance.services.sales_summary import (
    build_sales_summary,
    date_label,
    sales_summary,
    seed_series,
)

UTC = timezone.utc
END = date(2024, 5, 7)

LATE_NIGHTS = BusinessCalendarConfig(
    mode=CalendarMode.GENERAL,
    general_hours=GeneralHours(start=time(18, 0), end=time(3, 0)),
)


def _sale(amount, at, session_id=None):
    return SaleEvent(id=uuid.uuid4(), amount=Decimal(amount), created_at=at, table_session_id=session_id, payment_status="PAID")


def _session(total, ended):
    return TableSessionEvent(
        id=uuid.uuid4(), total_cost=Decimal(total), started_at=ended, ended_at=ended, status="COMPLETED"
    )


def test_seed_series_is_oldest_first():
    series = seed_series(END, 7)
    assert [p.date for p in series][0] == date(2024, 5, 1)
    assert series[-1].date == END
    assert all(p.pos_amount == 0 and p.table_amount == 0 for p in series)


def test_seed_series_needs_at_least_one_day():
    with pytest.raises(ValueError):
        seed_series(END, 0)


def test_date_label():
    assert date_label(date(2024, 5, 1)) == "Wed 01/05"


def test_events_bucket_by_business_day():
    series = build_sales_summary(
        [
            _sale("10", datetime(2024, 5, 6, 20, 0, tzinfo=UTC)),
            # after midnight, still Monday night
            _sale("5", datetime(2024, 5, 7, 2, 0, tzinfo=UTC)),
            _sale("1", datetime(2024, 5, 7, 19, 0, tzinfo=UTC)),
        ],
        [_session("30", datetime(2024, 5, 7, 1, 0, tzinfo=UTC))],
        config=LATE_NIGHTS,
        end_day=END,
        days=2,
    )
    monday, tuesday = series
    assert (monday.pos_amount, monday.table_amount) == (Decimal("15"), Decimal("30"))
    assert (tuesday.pos_amount, tuesday.table_amount) == (Decimal("1"), Decimal("0"))


def test_linked_sales_and_out_of_range_events_are_dropped():
    s = _session("50", datetime(2024, 5, 7, 12, 0, tzinfo=UTC))
    series = build_sales_summary(
        [
            _sale("20", datetime(2024, 5, 7, 11, 0, tzinfo=UTC), session_id=s.id),
            # resolves to May 5, before the series starts
            _sale("99", datetime(2024, 5, 6, 1, 0, tzinfo=UTC)),
        ],
        [s],
        config=LATE_NIGHTS,
        end_day=END,
        days=2,
    )
    assert sum(p.pos_amount for p in series) == 0
    assert series[-1].table_amount == Decimal("50")


def test_sales_summary_reads_last_days_overnight_tail(db):
    company = make_company(db, business_hours_start="18:00", business_hours_end="03:00", timezone="UTC")
    db.add_all(
        [
            PosOrderORM(id=uuid.uuid4(), company_id=company.id, amount=Decimal("8.00"), payment_status="PAID", created_at=utc(2024, 5, 8, 1, 0)),
            PosOrderORM(id=uuid.uuid4(), company_id=company.id, amount=Decimal("9.00"), payment_status="PENDING", created_at=utc(2024, 5, 7, 20, 0)),
            TableSessionORM(
                id=uuid.uuid4(),
                company_id=company.id,
                status="COMPLETED",
                started_at=utc(2024, 5, 7, 19, 0),
                ended_at=utc(2024, 5, 7, 22, 0),
                total_cost=Decimal("45.00"),
            ),
        ]
    )
    db.commit()

    series = sales_summary(db, company=company, days=3, end_day=END)
    assert [p.date for p in series] == [date(2024, 5, 5), date(2024, 5, 6), END]
    assert series[-1].pos_amount == Decimal("8.00")
    assert series[-1].table_amount == Decimal("45.00")
