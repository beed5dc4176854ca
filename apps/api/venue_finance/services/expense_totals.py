from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from venue_finance.models.enums import ExpenseCategory, ItemType, MovementType
from venue_finance.services.business_calendar import TimeWindow
from venue_finance.services.events import (
    ZERO,
    EventKind,
    FinancialEvent,
    MaintenanceEvent,
    ManualExpenseEvent,
    StockMovementEvent,
    money,
)

# manual categories not listed here fall into OTHER
_CATEGORY_KIND: dict[str, EventKind] = {
    ExpenseCategory.STAFF.value: EventKind.STAFF,
    ExpenseCategory.UTILITIES.value: EventKind.UTILITY,
    ExpenseCategory.MAINTENANCE.value: EventKind.MAINTENANCE,
}

_KIND_FIELD: dict[EventKind, str] = {
    EventKind.INVENTORY_COST: "inventory_cost",
    EventKind.INTERNAL_USE_COST: "other_expenses",
    EventKind.MAINTENANCE: "maintenance_cost",
    EventKind.STAFF: "staff_cost",
    EventKind.UTILITY: "utility_cost",
    EventKind.OTHER: "other_expenses",
}


@dataclass(frozen=True)
class ExpenseTotals:
    inventory_cost: Decimal = ZERO
    maintenance_cost: Decimal = ZERO
    staff_cost: Decimal = ZERO
    utility_cost: Decimal = ZERO
    other_expenses: Decimal = ZERO

    @property
    def total_expense(self) -> Decimal:
        return (
            self.inventory_cost
            + self.maintenance_cost
            + self.staff_cost
            + self.utility_cost
            + self.other_expenses
        )


def movement_to_event(movement: StockMovementEvent) -> Optional[FinancialEvent]:
    if movement.type != MovementType.PURCHASE:
        return None
    # unclassified items are treated as resale stock
    if movement.item_classification == ItemType.INTERNAL_USE:
        kind = EventKind.INTERNAL_USE_COST
    else:
        kind = EventKind.INVENTORY_COST
    return FinancialEvent(
        kind=kind,
        timestamp=movement.created_at,
        amount=money(movement.cost_price) * money(movement.quantity),
        source_id=movement.id,
    )


def maintenance_to_event(maintenance: MaintenanceEvent) -> FinancialEvent:
    return FinancialEvent(
        kind=EventKind.MAINTENANCE,
        timestamp=maintenance.maintenance_at,
        amount=money(maintenance.cost),
        source_id=maintenance.id,
    )


def manual_expense_to_event(expense: ManualExpenseEvent, tz: ZoneInfo) -> FinancialEvent:
    return FinancialEvent(
        kind=_CATEGORY_KIND.get(str(expense.category).upper(), EventKind.OTHER),
        timestamp=datetime.combine(expense.expense_date, time.min, tzinfo=tz),
        amount=money(expense.amount),
        source_id=expense.id,
    )


def expense_events(
    movements: Iterable[StockMovementEvent],
    maintenance: Iterable[MaintenanceEvent],
    expenses: Iterable[ManualExpenseEvent],
    *,
    tz: ZoneInfo,
) -> list[FinancialEvent]:
    events: list[FinancialEvent] = []
    for movement in movements:
        ev = movement_to_event(movement)
        if ev is not None:
            events.append(ev)
    events.extend(maintenance_to_event(m) for m in maintenance)
    events.extend(manual_expense_to_event(e, tz) for e in expenses)
    return events


def aggregate_expenses(
    movements: Iterable[StockMovementEvent],
    maintenance: Iterable[MaintenanceEvent],
    expenses: Iterable[ManualExpenseEvent],
    *,
    window: TimeWindow,
    tz: ZoneInfo,
) -> ExpenseTotals:
    """Categorized expense totals.

    ``window`` is always a calendar-day window, even for DAILY reports whose
    income side follows business hours.
    """
    sums = dict.fromkeys(set(_KIND_FIELD.values()), ZERO)
    for event in expense_events(movements, maintenance, expenses, tz=tz):
        if not window.contains(event.timestamp):
            continue
        name = _KIND_FIELD[event.kind]
        sums[name] += event.amount
    return ExpenseTotals(**sums)
