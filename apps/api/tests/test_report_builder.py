import uuid
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from conftest import make_company, utc
from venue_finance.models.enums import PostedExpenseType, PostedIncomeType, ReportSource, ReportType
from venue_finance.models.financial_report import FinancialReportORM
from venue_finance.models.pos import PosOrderORM
from venue_finance.services.errors import InvalidTimeRange, PersistenceFailure
from venue_finance.services.expense_totals import ExpenseTotals
from venue_finance.services.financial_reports import generate_financial_report
from venue_finance.services.report_builder import ReportFigures, post_expense, post_income, report_name
from venue_finance.services.revenue import RevenueTotals

DAY = date(2024, 5, 1)


def _reports(db, company_id):
    return db.execute(
        select(FinancialReportORM).where(FinancialReportORM.company_id == company_id)
    ).scalars().all()


def _assert_identities(r):
    assert r.total_income == r.sales_income + r.table_rent_income + r.other_income
    assert r.total_expense == (
        r.inventory_cost + r.maintenance_cost + r.staff_cost + r.utility_cost + r.other_expenses
    )
    assert r.total_income - r.total_expense == r.net_profit


def test_figures_round_components_before_totals():
    figures = ReportFigures.from_totals(
        RevenueTotals(sales_income=Decimal("0.005"), table_rent_income=Decimal("0.005")),
        ExpenseTotals(staff_cost=Decimal("1.004")),
    )
    assert figures.sales_income == Decimal("0.01")
    assert figures.total_income == Decimal("0.02")
    assert figures.net_profit == Decimal("-0.98")


def test_report_names():
    assert report_name(ReportType.DAILY, DAY, DAY) == "Daily report 2024-05-01"
    assert report_name(ReportType.CUSTOM, DAY, date(2024, 5, 7)) == "Custom report 2024-05-01 - 2024-05-07"


def test_posting_same_day_increments_one_report(db):
    company = make_company(db)
    for amount in ("15.00", "25.00"):
        post_expense(
            db,
            company_id=company.id,
            expense_type=PostedExpenseType.MAINTENANCE,
            amount=Decimal(amount),
            on_date=DAY,
            config=None,
            generated_by_id=None,
        )

    reports = _reports(db, company.id)
    assert len(reports) == 1
    r = reports[0]
    assert r.source == ReportSource.POSTED.value
    assert r.report_type == ReportType.DAILY.value
    assert r.maintenance_cost == Decimal("40.00")
    assert r.total_expense == Decimal("40.00")
    assert r.net_profit == Decimal("-40.00")
    _assert_identities(r)


def test_posting_income_increments_income_and_profit(db):
    company = make_company(db)
    kwargs = dict(company_id=company.id, on_date=DAY, config=None, generated_by_id=None)

    _, created = post_income(db, income_type=PostedIncomeType.OTHER, amount=Decimal("20.00"), **kwargs)
    assert created is True
    post_expense(db, expense_type=PostedExpenseType.STAFF, amount=Decimal("8.00"), **kwargs)
    report, created = post_income(db, income_type=PostedIncomeType.SALES, amount=Decimal("5.555"), **kwargs)

    assert created is False
    assert len(_reports(db, company.id)) == 1
    assert report.other_income == Decimal("20.00")
    assert report.sales_income == Decimal("5.56")
    assert report.total_income == Decimal("25.56")
    assert report.net_profit == Decimal("17.56")
    _assert_identities(report)


def test_posting_income_requires_positive_amount(db):
    company = make_company(db)
    with pytest.raises(ValueError):
        post_income(
            db,
            company_id=company.id,
            income_type=PostedIncomeType.SALES,
            amount=Decimal("-1"),
            on_date=DAY,
            config=None,
            generated_by_id=None,
        )


def test_posting_reports_creation(db):
    company = make_company(db)
    kwargs = dict(company_id=company.id, on_date=DAY, config=None, generated_by_id=None)

    _, created = post_expense(db, expense_type=PostedExpenseType.STAFF, amount=Decimal("10"), **kwargs)
    assert created is True
    report, created = post_expense(db, expense_type=PostedExpenseType.UTILITY, amount=Decimal("2.50"), **kwargs)
    assert created is False
    assert (report.staff_cost, report.utility_cost) == (Decimal("10.00"), Decimal("2.50"))

    _, created = post_expense(
        db, expense_type=PostedExpenseType.OTHER, amount=Decimal("1"), **{**kwargs, "on_date": date(2024, 5, 2)}
    )
    assert created is True
    assert len(_reports(db, company.id)) == 2


def test_posting_requires_positive_amount(db):
    company = make_company(db)
    with pytest.raises(ValueError):
        post_expense(
            db,
            company_id=company.id,
            expense_type=PostedExpenseType.OTHER,
            amount=Decimal("0"),
            on_date=DAY,
            config=None,
            generated_by_id=None,
        )


def test_posting_ignores_generated_reports(db):
    company = make_company(db)
    generate_financial_report(
        db, company=company, report_type=ReportType.DAILY, start=datetime(2024, 5, 1), end=None, generated_by_id=None
    )
    post_expense(
        db,
        company_id=company.id,
        expense_type=PostedExpenseType.STAFF,
        amount=Decimal("5"),
        on_date=DAY,
        config=None,
        generated_by_id=None,
    )
    sources = sorted(r.source for r in _reports(db, company.id))
    assert sources == [ReportSource.GENERATED.value, ReportSource.POSTED.value]


def test_generate_always_creates_new_row(db):
    company = make_company(db)
    db.add(PosOrderORM(id=uuid.uuid4(), company_id=company.id, amount=Decimal("12.34"), payment_status="PAID", created_at=utc(2024, 5, 1, 12)))
    db.commit()

    first = generate_financial_report(
        db, company=company, report_type=ReportType.DAILY, start=datetime(2024, 5, 1), end=None, generated_by_id=None
    )
    second = generate_financial_report(
        db, company=company, report_type=ReportType.DAILY, start=datetime(2024, 5, 1), end=None, generated_by_id=None
    )

    assert first.id != second.id
    assert first.sales_income == second.sales_income == Decimal("12.34")
    assert len(_reports(db, company.id)) == 2
    _assert_identities(first)


def test_custom_range_rejects_reversed_bounds(db):
    company = make_company(db)
    with pytest.raises(InvalidTimeRange):
        generate_financial_report(
            db,
            company=company,
            report_type=ReportType.CUSTOM,
            start=datetime(2024, 5, 3),
            end=datetime(2024, 5, 1),
            generated_by_id=None,
        )
    assert _reports(db, company.id) == []


def test_failed_write_persists_nothing(db):
    company = make_company(db)
    with patch.object(db, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full"))):
        with pytest.raises(PersistenceFailure):
            generate_financial_report(
                db,
                company=company,
                report_type=ReportType.DAILY,
                start=datetime(2024, 5, 1),
                end=None,
                generated_by_id=None,
            )
    assert _reports(db, company.id) == []


def test_zero_figures_with_one_expense():
    figures = replace(ReportFigures.zero(), maintenance_cost=Decimal("3.00"))
    cols = figures.as_columns()
    assert cols["total_income"] == Decimal("0.00")
    assert cols["total_expense"] == Decimal("3.00")
    assert cols["net_profit"] == Decimal("-3.00")
