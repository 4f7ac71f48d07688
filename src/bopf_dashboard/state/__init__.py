"""Dashboard state (pure transitions) and the session that drives it."""

from .app_state import DashboardState, FORECAST_FAILED_MESSAGE  # noqa
from .session import DashboardSession, RequestTicket  # noqa

__all__ = ["DashboardSession", "DashboardState", "FORECAST_FAILED_MESSAGE", "RequestTicket"]
