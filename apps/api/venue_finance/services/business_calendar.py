"""
Business calendar: opening-hours policy and business-day resolution.

A business day is the opening-hours window anchored to one calendar date. When
closing time is earlier than opening time the window runs past midnight into
the next calendar date, so a sale at 01:30 on Tuesday can belong to Monday.

Every function here is pure: the config is passed in explicitly and nothing is
cached between calls. ``config=None`` means "no business hours configured" and
resolves to plain UTC calendar days.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from venue_finance.services.errors import (
    ConfigurationMissing,
    InvalidCalendarConfig,
    InvalidTimeRange,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"

# windows end on the last millisecond of the closing minute's first second
_LAST_MS = timedelta(milliseconds=999)
_CALENDAR_DAY_END = time(23, 59, 59, 999000)


# ============================================================
# Enums
# ============================================================

class Weekday(str, Enum):
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return _WEEKDAY_ORDER[day.weekday()]

    @classmethod
    def parse(cls, code: Any) -> "Weekday":
        if isinstance(code, Weekday):
            return code
        if not isinstance(code, str):
            raise InvalidCalendarConfig(f"Invalid weekday code: {code!r}")
        try:
            return cls(code.strip().upper())
        except ValueError:
            raise InvalidCalendarConfig(f"Unknown weekday code: {code!r}") from None


# date.weekday(): Monday == 0
_WEEKDAY_ORDER: tuple[Weekday, ...] = tuple(Weekday)
ALL_WEEKDAYS: frozenset[Weekday] = frozenset(Weekday)


class CalendarMode(str, Enum):
    GENERAL = "GENERAL"
    PER_WEEKDAY = "PER_WEEKDAY"


# ============================================================
# Parsing helpers
# ============================================================

def parse_hhmm(value: Any) -> time:
    """Parse a 24-hour ``HH:MM`` string."""
    if not isinstance(value, str):
        raise InvalidCalendarConfig(f"Invalid time of day: {value!r}")
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(len(p) == 2 and p.isdigit() for p in parts):
        raise InvalidCalendarConfig(f"Invalid time of day (expected HH:MM): {value!r}")
    hh, mm = int(parts[0]), int(parts[1])
    if hh > 23 or mm > 59:
        raise InvalidCalendarConfig(f"Invalid time of day (expected HH:MM): {value!r}")
    return time(hh, mm)


def format_hhmm(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def load_timezone(name: Optional[str]) -> ZoneInfo:
    key = (name or "").strip() or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidCalendarConfig(f"Unknown timezone: {key!r}") from None


def _load_json(raw: str, what: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidCalendarConfig(f"{what} must be valid JSON") from e


def parse_operating_days(raw: Optional[str | Iterable[Any]]) -> frozenset[Weekday]:
    """Decode the stored operating-days list.

    ``None`` or an empty string means the setting was never saved: open every
    day. An explicit ``[]`` is an empty set.
    """
    if raw is None:
        return ALL_WEEKDAYS
    if isinstance(raw, str):
        if not raw.strip():
            return ALL_WEEKDAYS
        raw = _load_json(raw, "Operating days")
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        raise InvalidCalendarConfig("Operating days must be a JSON array of weekday codes")
    return frozenset(Weekday.parse(code) for code in raw)


def stringify_operating_days(days: Iterable[Weekday | str]) -> str:
    selected = {Weekday.parse(d) for d in days}
    return json.dumps([d.value for d in Weekday if d in selected])


# ============================================================
# Config values
# ============================================================

@dataclass(frozen=True)
class DayHours:
    start: time
    end: time
    enabled: bool = True

    @property
    def crosses_midnight(self) -> bool:
        return self.end < self.start

    def window(self, day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
        start = datetime.combine(day, self.start, tzinfo=tz)
        end_day = day + timedelta(days=1) if self.crosses_midnight else day
        end = datetime.combine(end_day, self.end, tzinfo=tz) + _LAST_MS
        return start, end


@dataclass(frozen=True)
class GeneralHours:
    start: time
    end: time
    operating_days: frozenset[Weekday] = ALL_WEEKDAYS


@dataclass(frozen=True)
class BusinessCalendarConfig:
    mode: CalendarMode
    timezone: str = DEFAULT_TIMEZONE
    general_hours: Optional[GeneralHours] = None
    per_weekday_hours: Mapping[Weekday, DayHours] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.mode is CalendarMode.GENERAL and self.general_hours is None:
            raise InvalidCalendarConfig("GENERAL mode requires general hours")
        load_timezone(self.timezone)
        object.__setattr__(self, "per_weekday_hours", MappingProxyType(dict(self.per_weekday_hours)))

    @property
    def tzinfo(self) -> ZoneInfo:
        return load_timezone(self.timezone)

    def hours_for(self, weekday: Weekday) -> Optional[DayHours]:
        """Opening hours for ``weekday``, or None when the venue is closed."""
        if self.mode is CalendarMode.GENERAL:
            general = self.general_hours
            if weekday not in general.operating_days:
                return None
            return DayHours(start=general.start, end=general.end)

        hours = self.per_weekday_hours.get(weekday)
        if hours is None or not hours.enabled:
            return None
        return hours


def parse_individual_day_hours(raw: Optional[str | Mapping[str, Any]]) -> dict[Weekday, DayHours]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return {}
    if isinstance(raw, str):
        raw = _load_json(raw, "Individual day hours")
    if not isinstance(raw, Mapping):
        raise InvalidCalendarConfig("Individual day hours must be a JSON object keyed by weekday")

    hours: dict[Weekday, DayHours] = {}
    for code, entry in raw.items():
        weekday = Weekday.parse(code)
        if not isinstance(entry, Mapping) or "start" not in entry or "end" not in entry:
            raise InvalidCalendarConfig(f"Hours for {weekday.value} need 'start' and 'end'")
        hours[weekday] = DayHours(
            start=parse_hhmm(entry["start"]),
            end=parse_hhmm(entry["end"]),
            enabled=bool(entry.get("enabled", True)),
        )
    return hours


def stringify_individual_day_hours(hours: Mapping[Weekday, DayHours]) -> str:
    out: dict[str, dict[str, Any]] = {}
    for weekday in Weekday:
        h = hours.get(weekday)
        if h is None:
            continue
        out[weekday.value] = {
            "start": format_hhmm(h.start),
            "end": format_hhmm(h.end),
            "enabled": h.enabled,
        }
    return json.dumps(out)


def config_from_company(company: Any, *, default_timezone: str = DEFAULT_TIMEZONE) -> BusinessCalendarConfig:
    """Build the calendar config from stored venue settings.

    Individual weekday hours win when enabled; otherwise general hours are used.
    Raises ConfigurationMissing when neither is set.
    """
    tz_name = getattr(company, "timezone", None) or default_timezone

    individual = getattr(company, "individual_day_hours", None)
    if getattr(company, "use_individual_hours", False) and individual:
        return BusinessCalendarConfig(
            mode=CalendarMode.PER_WEEKDAY,
            timezone=tz_name,
            per_weekday_hours=parse_individual_day_hours(individual),
        )

    start = getattr(company, "business_hours_start", None)
    end = getattr(company, "business_hours_end", None)
    if start and end:
        return BusinessCalendarConfig(
            mode=CalendarMode.GENERAL,
            timezone=tz_name,
            general_hours=GeneralHours(
                start=parse_hhmm(start),
                end=parse_hhmm(end),
                operating_days=parse_operating_days(getattr(company, "operating_days", None)),
            ),
        )

    raise ConfigurationMissing(f"No business hours configured for company {getattr(company, 'id', '?')}")


def load_calendar_config(company: Any, *, default_timezone: str = DEFAULT_TIMEZONE) -> Optional[BusinessCalendarConfig]:
    """Like config_from_company, but a missing config degrades to calendar days."""
    try:
        return config_from_company(company, default_timezone=default_timezone)
    except ConfigurationMissing as e:
        logger.warning("%s; using calendar-day bucketing", e.detail)
        return None


# ============================================================
# Windows
# ============================================================

def calendar_timezone(config: Optional[BusinessCalendarConfig]) -> ZoneInfo:
    return config.tzinfo if config is not None else ZoneInfo(DEFAULT_TIMEZONE)


def as_aware(ts: datetime) -> datetime:
    """Naive timestamps are UTC."""
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def to_local(ts: datetime, config: Optional[BusinessCalendarConfig]) -> datetime:
    return as_aware(ts).astimezone(calendar_timezone(config))


@dataclass(frozen=True)
class TimeWindow:
    """Closed interval ``[start, end]``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if as_aware(self.end) < as_aware(self.start):
            raise InvalidTimeRange(
                f"Window end {self.end.isoformat()} precedes start {self.start.isoformat()}"
            )

    def contains(self, ts: Optional[datetime]) -> bool:
        if ts is None:
            return False
        ts = as_aware(ts)
        return as_aware(self.start) <= ts <= as_aware(self.end)

    def union(self, other: "TimeWindow") -> "TimeWindow":
        return TimeWindow(
            start=min(as_aware(self.start), as_aware(other.start)),
            end=max(as_aware(self.end), as_aware(other.end)),
        )


def calendar_day_bounds(day: date, tz: ZoneInfo) -> TimeWindow:
    return TimeWindow(
        start=datetime.combine(day, time.min, tzinfo=tz),
        end=datetime.combine(day, _CALENDAR_DAY_END, tzinfo=tz),
    )


def calendar_range_bounds(first: date, last: date, tz: ZoneInfo) -> TimeWindow:
    return TimeWindow(
        start=calendar_day_bounds(first, tz).start,
        end=calendar_day_bounds(last, tz).end,
    )


# ============================================================
# Resolver
# ============================================================

def business_window(day: date, config: Optional[BusinessCalendarConfig]) -> TimeWindow:
    """Opening-hours window of ``day``; the calendar day when closed or unconfigured."""
    tz = calendar_timezone(config)
    hours = config.hours_for(Weekday.of(day)) if config is not None else None
    if hours is None:
        return calendar_day_bounds(day, tz)
    start, end = hours.window(day, tz)
    return TimeWindow(start=start, end=end)


def resolve_day_start(day: date, config: Optional[BusinessCalendarConfig]) -> datetime:
    return business_window(day, config).start


def resolve_day_end(day: date, config: Optional[BusinessCalendarConfig]) -> datetime:
    return business_window(day, config).end


def assign_business_day(ts: datetime, config: Optional[BusinessCalendarConfig]) -> date:
    """Calendar date of the business day that owns ``ts``.

    The previous date's overnight tail is checked first, so a timestamp on the
    shared boundary millisecond goes to the earlier business day. Anything not
    inside an opening window belongs to its own calendar date.
    """
    local = to_local(ts, config)
    day = local.date()
    if config is None:
        return day

    tz = config.tzinfo
    previous = day - timedelta(days=1)
    prev_hours = config.hours_for(Weekday.of(previous))
    if prev_hours is not None and prev_hours.crosses_midnight:
        start, end = prev_hours.window(previous, tz)
        if start <= local <= end:
            return previous

    hours = config.hours_for(Weekday.of(day))
    if hours is not None:
        start, end = hours.window(day, tz)
        if start <= local <= end:
            return day

    return day
