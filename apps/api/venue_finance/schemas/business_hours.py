from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from venue_finance.services.business_calendar import Weekday, load_timezone, parse_hhmm
from venue_finance.services.errors import InvalidCalendarConfig


def _hhmm(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    try:
        parse_hhmm(v)
    except InvalidCalendarConfig as e:
        raise ValueError(e.detail) from None
    return v.strip()


class DayHoursIn(BaseModel):
    start: str
    end: str
    enabled: bool = True

    @field_validator("start", "end")
    @classmethod
    def _time(cls, v: str) -> str:
        return _hhmm(v)


class BusinessHoursIn(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    business_hours_start: Optional[str] = None
    business_hours_end: Optional[str] = None
    timezone: Optional[str] = None
    operating_days: Optional[List[Weekday]] = None
    individual_day_hours: Optional[Dict[Weekday, DayHoursIn]] = None
    use_individual_hours: Optional[bool] = None

    @field_validator("business_hours_start", "business_hours_end")
    @classmethod
    def _time(cls, v: Optional[str]) -> Optional[str]:
        return _hhmm(v)

    @field_validator("timezone")
    @classmethod
    def _tz(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            load_timezone(v)
        except InvalidCalendarConfig as e:
            raise ValueError(e.detail) from None
        return v.strip()


class BusinessHoursOut(BaseModel):
    company_id: UUID
    business_hours_start: Optional[str]
    business_hours_end: Optional[str]
    timezone: Optional[str]
    operating_days: List[Weekday]
    individual_day_hours: Dict[Weekday, DayHoursIn]
    use_individual_hours: bool


class BusinessDayResolveOut(BaseModel):
    company_id: UUID
    date: date
    weekday: Weekday
    configured: bool
    open: bool
    timezone: str
    start: datetime
    end: datetime
