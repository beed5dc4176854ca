from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import BaseModel


class SalesSummaryPointOut(BaseModel):
    date: date
    date_label: str
    pos_amount: Decimal
    table_amount: Decimal


class SalesSummaryOut(BaseModel):
    company_id: UUID
    days: int
    end_date: date
    points: List[SalesSummaryPointOut]
