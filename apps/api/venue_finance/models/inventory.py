# venue_finance/models/inventory.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from venue_finance.models.base import Base
from venue_finance.models.enums import ItemType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InventoryItemORM(Base):
    """
    Inventory item master.

    - item_type: SALE (resold at the counter) / INTERNAL_USE (cleaning, chalk, office supplies)
    - cost_price: purchase unit cost
    - sale_price: counter price (resale items only)
    """

    __tablename__ = "inventory_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(255), nullable=False, index=True)
    item_type = Column(String(16), nullable=False, default=ItemType.SALE.value, index=True)

    cost_price = Column(Numeric(12, 4), nullable=False, default=Decimal("0"))
    sale_price = Column(Numeric(12, 4), nullable=False, default=Decimal("0"))
    quantity = Column(Numeric(14, 4), nullable=False, default=Decimal("0"))

    note = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("ix_inventory_items_company_name", "company_id", "name"),
    )


class StockMovementORM(Base):
    """
    Stock movement ledger.

    type:
      - PURCHASE     : stock bought in (an expense)
      - SALE         : sold at the counter
      - ADJUSTMENT   : stock-take correction
      - INTERNAL_USE : consumed by the venue
    """

    __tablename__ = "stock_movements"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    item_id = Column(
        UUID(as_uuid=True),
        ForeignKey("inventory_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type = Column(String(16), nullable=False, index=True)

    # always positive; direction comes from type
    quantity = Column(Numeric(14, 4), nullable=False, default=Decimal("0"))

    # unit cost snapshot at movement time
    cost_price = Column(Numeric(12, 4), nullable=True)

    note = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    item = relationship("InventoryItemORM", lazy="selectin")

    __table_args__ = (
        Index("ix_stock_movements_item_created", "item_id", "created_at"),
    )
