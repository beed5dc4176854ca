from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional
from uuid import UUID

ZERO = Decimal("0")


class EventKind(str, Enum):
    SALE = "SALE"
    TABLE_RENT = "TABLE_RENT"
    INVENTORY_COST = "INVENTORY_COST"
    INTERNAL_USE_COST = "INTERNAL_USE_COST"
    MAINTENANCE = "MAINTENANCE"
    STAFF = "STAFF"
    UTILITY = "UTILITY"
    OTHER = "OTHER"


def money(value: Any) -> Decimal:
    """Exact decimal for a stored amount. Missing amounts count as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Not a monetary amount: {value!r}") from None


@dataclass(frozen=True)
class FinancialEvent:
    kind: EventKind
    timestamp: datetime
    amount: Decimal
    source_id: UUID


# ============================================================
# Source snapshots (read-only rows from the five event sources)
# ============================================================

@dataclass(frozen=True)
class SaleEvent:
    id: UUID
    amount: Optional[Decimal]
    created_at: datetime
    table_session_id: Optional[UUID]
    payment_status: str


@dataclass(frozen=True)
class TableSessionEvent:
    id: UUID
    total_cost: Optional[Decimal]
    started_at: datetime
    ended_at: Optional[datetime]
    status: str


@dataclass(frozen=True)
class StockMovementEvent:
    id: UUID
    quantity: Decimal
    cost_price: Optional[Decimal]
    type: str
    created_at: datetime
    item_classification: Optional[str]


@dataclass(frozen=True)
class MaintenanceEvent:
    id: UUID
    cost: Optional[Decimal]
    maintenance_at: datetime


@dataclass(frozen=True)
class ManualExpenseEvent:
    id: UUID
    amount: Optional[Decimal]
    category: str
    expense_date: date
