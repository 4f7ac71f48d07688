from __future__ import annotations

from typing import Any


class DashboardError(Exception):
    """Base class for every error raised by the dashboard engine."""


class RequestError(DashboardError):
    """A call to an external service failed (network, HTTP status or payload)."""


class ForecastRequestFailure(RequestError):
    """The forecast service could not produce a usable response.

    User-visible and retryable; the session keeps the last good series.
    """


class FxFetchFailure(RequestError):
    """The FX rate source failed. Non-fatal: the stored rate is kept."""


class InvalidScenarioEdit(DashboardError, ValueError):
    """A scenario field edit was rejected before reaching the store."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {field!r}: {value!r} ({reason})")
