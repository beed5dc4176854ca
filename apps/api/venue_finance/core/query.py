"""Shared query-string parameters and parsing for list endpoints."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, Query

LimitQuery = Query(50, ge=1, le=200, description="Page size (max 200)")
OffsetQuery = Query(0, ge=0, description="Rows to skip")


def parse_query_date(value: Optional[str]) -> Optional[date]:
    """``YYYY-MM-DD`` from a query string; 400 on anything else."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid date: {value}") from e


def utc_day_bounds(start: Optional[str], end: Optional[str]) -> tuple[Optional[datetime], Optional[datetime]]:
    """UTC midnight of ``start`` and of the day after ``end`` (exclusive)."""
    d1, d2 = parse_query_date(start), parse_query_date(end)
    lo = datetime.combine(d1, time.min, tzinfo=timezone.utc) if d1 else None
    hi = datetime.combine(d2 + timedelta(days=1), time.min, tzinfo=timezone.utc) if d2 else None
    return lo, hi
