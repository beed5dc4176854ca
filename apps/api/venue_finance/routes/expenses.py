"""Manual expense ledger.

Entries booked here are read back by the expense aggregator, so a generated
report for a date includes every ledger row dated inside its window.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from venue_finance.core.query import LimitQuery, OffsetQuery, parse_query_date
from venue_finance.db.session import get_db
from venue_finance.dependencies.auth import get_current_user
from venue_finance.dependencies.permissions import resolve_company_id
from venue_finance.models.enums import ExpenseCategory
from venue_finance.models.expense import ExpenseORM
from venue_finance.models.user import User
from venue_finance.schemas.expenses import ExpenseCreateIn, ExpenseListOut, ExpenseOut, ExpenseUpdateIn
from venue_finance.services.report_builder import to_money

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _owned_expense(db: Session, user: User, expense_id: UUID, company_id: Optional[UUID]) -> ExpenseORM:
    cid = resolve_company_id(user, company_id)
    row = db.get(ExpenseORM, expense_id)
    # another company's row is reported as missing
    if row is None or row.company_id != cid:
        raise HTTPException(status_code=404, detail="Expense not found")
    return row


@router.get("", response_model=ExpenseListOut)
def list_expenses(
    company_id: Optional[UUID] = Query(default=None),
    category: Optional[ExpenseCategory] = Query(default=None),
    start: Optional[str] = Query(default=None, description="YYYY-MM-DD, inclusive"),
    end: Optional[str] = Query(default=None, description="YYYY-MM-DD, inclusive"),
    q: str = Query("", max_length=200, description="matches description or notes"),
    limit: int = LimitQuery,
    offset: int = OffsetQuery,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ExpenseListOut:
    filters = [ExpenseORM.company_id == resolve_company_id(user, company_id)]
    first, last = parse_query_date(start), parse_query_date(end)
    if first is not None:
        filters.append(ExpenseORM.expense_date >= first)
    if last is not None:
        filters.append(ExpenseORM.expense_date <= last)
    if category is not None:
        filters.append(ExpenseORM.category == category.value)
    needle = q.strip()
    if needle:
        pattern = f"%{needle}%"
        filters.append(or_(ExpenseORM.description.ilike(pattern), ExpenseORM.notes.ilike(pattern)))

    rows = db.scalars(
        select(ExpenseORM)
        .where(*filters)
        .order_by(ExpenseORM.expense_date.desc(), ExpenseORM.created_at.desc())
        .offset(offset)
        .limit(limit)
    ).all()
    count, amount = db.execute(
        select(func.count(ExpenseORM.id), func.coalesce(func.sum(ExpenseORM.amount), 0)).where(*filters)
    ).one()

    return ExpenseListOut(
        items=[ExpenseOut.model_validate(r) for r in rows],
        total=int(count or 0),
        amount_total=to_money(amount),
    )


@router.post("", response_model=ExpenseOut, status_code=201)
def create_expense(
    body: ExpenseCreateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ExpenseORM:
    values = body.model_dump(exclude={"company_id"})
    values["category"] = body.category.value
    row = ExpenseORM(company_id=resolve_company_id(user, body.company_id), created_by_id=user.id, **values)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@router.get("/{expense_id}", response_model=ExpenseOut)
def get_expense(
    expense_id: UUID,
    company_id: Optional[UUID] = Query(default=None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ExpenseORM:
    return _owned_expense(db, user, expense_id, company_id)


@router.put("/{expense_id}", response_model=ExpenseOut)
def update_expense(
    expense_id: UUID,
    body: ExpenseUpdateIn,
    company_id: Optional[UUID] = Query(default=None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ExpenseORM:
    row = _owned_expense(db, user, expense_id, company_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field != "notes":
            continue
        setattr(row, field, value.value if isinstance(value, ExpenseCategory) else value)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{expense_id}", status_code=204)
def delete_expense(
    expense_id: UUID,
    company_id: Optional[UUID] = Query(default=None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    db.delete(_owned_expense(db, user, expense_id, company_id))
    db.commit()
    return Response(status_code=204)
