"""Derived-metrics and scenario-state engine for the mid-country BOPF tea
price dashboard.

Merges auction history, the model forecast and Kenya/India reference prices
into one series, derives trend / volatility / spread / field-pressure
indicators and field alerts, and keeps a what-if scenario apart from the
baseline.
"""

from .config import DashboardConfig, load_config  # noqa
