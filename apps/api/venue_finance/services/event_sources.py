"""
Read-only range queries for the five event sources.

Each fetch returns immutable snapshots so the aggregators never touch ORM
objects. Query bounds are converted to UTC before binding; stored timestamps
are UTC.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from venue_finance.models.enums import MovementType, PaymentStatus, SessionStatus
from venue_finance.models.expense import ExpenseORM
from venue_finance.models.inventory import InventoryItemORM, StockMovementORM
from venue_finance.models.pos import PosOrderORM
from venue_finance.models.table_session import TableMaintenanceORM, TableSessionORM
from venue_finance.services.business_calendar import TimeWindow, as_aware
from venue_finance.services.events import (
    MaintenanceEvent,
    ManualExpenseEvent,
    SaleEvent,
    StockMovementEvent,
    TableSessionEvent,
)

logger = logging.getLogger(__name__)


def _utc(ts: datetime) -> datetime:
    return as_aware(ts).astimezone(timezone.utc)


def _bounds(window: TimeWindow) -> tuple[datetime, datetime]:
    return _utc(window.start), _utc(window.end)


@dataclass(frozen=True)
class EventBatch:
    sales: tuple[SaleEvent, ...] = ()
    sessions: tuple[TableSessionEvent, ...] = ()
    movements: tuple[StockMovementEvent, ...] = ()
    maintenance: tuple[MaintenanceEvent, ...] = ()
    expenses: tuple[ManualExpenseEvent, ...] = ()


def fetch_sales(db: Session, company_id: UUID, window: TimeWindow) -> list[SaleEvent]:
    start, end = _bounds(window)
    stmt = (
        select(PosOrderORM)
        .where(
            PosOrderORM.company_id == company_id,
            PosOrderORM.payment_status == PaymentStatus.PAID.value,
            PosOrderORM.created_at >= start,
            PosOrderORM.created_at <= end,
        )
        .order_by(PosOrderORM.created_at.asc())
    )
    return [
        SaleEvent(
            id=r.id,
            amount=r.amount,
            created_at=as_aware(r.created_at),
            table_session_id=r.table_session_id,
            payment_status=r.payment_status,
        )
        for r in db.execute(stmt).scalars().all()
    ]


def fetch_table_sessions(db: Session, company_id: UUID, window: TimeWindow) -> list[TableSessionEvent]:
    start, end = _bounds(window)
    stmt = (
        select(TableSessionORM)
        .where(
            TableSessionORM.company_id == company_id,
            TableSessionORM.status == SessionStatus.COMPLETED.value,
            TableSessionORM.ended_at.isnot(None),
            TableSessionORM.ended_at >= start,
            TableSessionORM.ended_at <= end,
        )
        .order_by(TableSessionORM.ended_at.asc())
    )
    return [
        TableSessionEvent(
            id=r.id,
            total_cost=r.total_cost,
            started_at=as_aware(r.started_at),
            ended_at=as_aware(r.ended_at),
            status=r.status,
        )
        for r in db.execute(stmt).scalars().all()
    ]


def fetch_stock_movements(db: Session, company_id: UUID, window: TimeWindow) -> list[StockMovementEvent]:
    start, end = _bounds(window)
    stmt = (
        select(StockMovementORM, InventoryItemORM.item_type)
        .join(InventoryItemORM, InventoryItemORM.id == StockMovementORM.item_id)
        .where(
            InventoryItemORM.company_id == company_id,
            StockMovementORM.type == MovementType.PURCHASE.value,
            StockMovementORM.created_at >= start,
            StockMovementORM.created_at <= end,
        )
        .order_by(StockMovementORM.created_at.asc())
    )
    return [
        StockMovementEvent(
            id=movement.id,
            quantity=movement.quantity,
            cost_price=movement.cost_price,
            type=movement.type,
            created_at=as_aware(movement.created_at),
            item_classification=item_type,
        )
        for movement, item_type in db.execute(stmt).all()
    ]


def fetch_maintenance(db: Session, company_id: UUID, window: TimeWindow) -> list[MaintenanceEvent]:
    start, end = _bounds(window)
    stmt = (
        select(TableMaintenanceORM)
        .where(
            TableMaintenanceORM.company_id == company_id,
            TableMaintenanceORM.maintenance_at >= start,
            TableMaintenanceORM.maintenance_at <= end,
        )
        .order_by(TableMaintenanceORM.maintenance_at.asc())
    )
    return [
        MaintenanceEvent(id=r.id, cost=r.cost, maintenance_at=as_aware(r.maintenance_at))
        for r in db.execute(stmt).scalars().all()
    ]


def fetch_manual_expenses(db: Session, company_id: UUID, window: TimeWindow) -> list[ManualExpenseEvent]:
    # expense_date is a venue-local date; the window is venue-local too
    stmt = (
        select(ExpenseORM)
        .where(
            ExpenseORM.company_id == company_id,
            ExpenseORM.expense_date >= window.start.date(),
            ExpenseORM.expense_date <= window.end.date(),
        )
        .order_by(ExpenseORM.expense_date.asc(), ExpenseORM.created_at.asc())
    )
    return [
        ManualExpenseEvent(id=r.id, amount=r.amount, category=r.category, expense_date=r.expense_date)
        for r in db.execute(stmt).scalars().all()
    ]


def load_events(
    db: Session,
    company_id: UUID,
    *,
    income_window: TimeWindow,
    expense_window: TimeWindow,
) -> EventBatch:
    """Run the five reads in one session.

    The reads are independent of each other; running them in the request's
    session gives every report a single consistent snapshot. Any failure
    propagates and aborts the whole report.
    """
    batch = EventBatch(
        sales=tuple(fetch_sales(db, company_id, income_window)),
        sessions=tuple(fetch_table_sessions(db, company_id, income_window)),
        movements=tuple(fetch_stock_movements(db, company_id, expense_window)),
        maintenance=tuple(fetch_maintenance(db, company_id, expense_window)),
        expenses=tuple(fetch_manual_expenses(db, company_id, expense_window)),
    )
    logger.debug(
        "Loaded events company=%s sales=%d sessions=%d movements=%d maintenance=%d expenses=%d",
        company_id,
        len(batch.sales),
        len(batch.sessions),
        len(batch.movements),
        len(batch.maintenance),
        len(batch.expenses),
    )
    return batch
