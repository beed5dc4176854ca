# venue_finance/models/enums.py
from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    SUPERADMIN = "SUPERADMIN"
    ADMIN = "ADMIN"
    SELLER = "SELLER"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class SessionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ItemType(str, Enum):
    # resale stock vs. consumables used by the venue itself
    SALE = "SALE"
    INTERNAL_USE = "INTERNAL_USE"


class MovementType(str, Enum):
    PURCHASE = "PURCHASE"
    SALE = "SALE"
    ADJUSTMENT = "ADJUSTMENT"
    INTERNAL_USE = "INTERNAL_USE"


class ExpenseCategory(str, Enum):
    STAFF = "STAFF"
    UTILITIES = "UTILITIES"
    MAINTENANCE = "MAINTENANCE"
    SUPPLIES = "SUPPLIES"
    RENT = "RENT"
    INSURANCE = "INSURANCE"
    MARKETING = "MARKETING"
    OTHER = "OTHER"


class ReportType(str, Enum):
    DAILY = "DAILY"
    CUSTOM = "CUSTOM"


class ReportSource(str, Enum):
    GENERATED = "GENERATED"
    POSTED = "POSTED"


class PostedExpenseType(str, Enum):
    INVENTORY = "INVENTORY"
    MAINTENANCE = "MAINTENANCE"
    STAFF = "STAFF"
    UTILITY = "UTILITY"
    OTHER = "OTHER"


class PostedIncomeType(str, Enum):
    SALES = "SALES"
    TABLE_RENT = "TABLE_RENT"
    OTHER = "OTHER"
