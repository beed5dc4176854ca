from __future__ import annotations


class FinanceError(RuntimeError):
    """Base class for errors raised by the finance engine."""

    status_code: int = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ConfigurationMissing(FinanceError):
    """No business calendar configured for the company.

    Not fatal: the config loader logs it and degrades to calendar-day bucketing.
    """

    status_code = 500


class InvalidCalendarConfig(FinanceError):
    """Malformed business-hours settings (HH:MM, weekday codes, JSON, timezone)."""

    status_code = 400


class InvalidTimeRange(FinanceError):
    """Normalized window end precedes its start."""

    status_code = 400


class UnauthorizedAccess(FinanceError):
    """Caller is not entitled to the requested company's data."""

    status_code = 403


class PersistenceFailure(FinanceError):
    """The final write failed; the transaction was rolled back."""

    status_code = 500
