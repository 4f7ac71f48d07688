"""Dashboard state and its transitions.

The whole dashboard is one immutable ``DashboardState``. Every event (edit,
request issued, response, failure) produces a new state through the functions
below; indicators and alerts are recomputed by ``derive`` and never set
directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from bopf_dashboard.alerts import Alert, classify_alerts
from bopf_dashboard.config import DashboardConfig
from bopf_dashboard.connectors.schema import ForecastPoint, ForecastResponse
from bopf_dashboard.indicators import Indicators, compute_indicators
from bopf_dashboard.scenario import ScenarioInput
from bopf_dashboard.series import empty_series, merge_series

FORECAST_FAILED_MESSAGE = "Forecast request failed. Please check the API or your inputs."


@dataclass(frozen=True, eq=False)
class DashboardState:
    scenario: ScenarioInput
    # Override the displayed response was requested with (None = baseline).
    what_if: Optional[dict[str, Any]] = None
    response: Optional[ForecastResponse] = None
    series: pd.DataFrame = field(default_factory=empty_series)
    indicators: Indicators = Indicators()
    alerts: tuple[Alert, ...] = ()
    loading: bool = False
    error: Optional[str] = None
    last_updated: Optional[datetime] = None
    latest_seq: int = 0  # last issued request
    applied_seq: int = 0  # request whose response is displayed

    @property
    def forecast(self) -> Optional[ForecastPoint]:
        return self.response.forecast if self.response is not None else None

    @property
    def effective_scenario(self) -> ScenarioInput:
        if not self.what_if:
            return self.scenario
        return self.scenario.merged(self.what_if)


def derive(state: DashboardState, cfg: DashboardConfig) -> DashboardState:
    scenario = state.effective_scenario
    response = state.response
    indicators = compute_indicators(
        state.series,
        response.kenya_history if response is not None else [],
        response.india_history if response is not None else [],
        scenario,
        cfg.pressure,
    )
    alerts = tuple(classify_alerts(scenario, cfg.alerts))
    return replace(state, indicators=indicators, alerts=alerts)


def initial_state(scenario: ScenarioInput, cfg: DashboardConfig) -> DashboardState:
    return derive(DashboardState(scenario=scenario), cfg)


def scenario_changed(
    state: DashboardState,
    scenario: ScenarioInput,
    cfg: DashboardConfig,
    edited: Iterable[str] = (),
) -> DashboardState:
    """New baseline; edited fields stop being shadowed by a displayed what-if."""
    what_if = state.what_if
    if what_if:
        edited = set(edited)
        what_if = {k: v for k, v in what_if.items() if k not in edited} or None
    return derive(replace(state, scenario=scenario, what_if=what_if), cfg)


def request_issued(state: DashboardState, seq: int) -> DashboardState:
    return replace(state, latest_seq=seq, loading=True, error=None)


def is_current(state: DashboardState, seq: int) -> bool:
    return seq == state.latest_seq


def response_received(
    state: DashboardState,
    seq: int,
    response: ForecastResponse,
    what_if: Optional[Mapping[str, Any]],
    cfg: DashboardConfig,
    now: datetime,
) -> DashboardState:
    """Swap in a new response; a superseded ``seq`` leaves the state unchanged."""
    if not is_current(state, seq):
        return state
    series = merge_series(response.history, response.forecast)
    updated = replace(
        state,
        what_if=dict(what_if) if what_if else None,
        response=response,
        series=series,
        loading=False,
        error=None,
        last_updated=now,
        applied_seq=seq,
    )
    return derive(updated, cfg)


def request_failed(state: DashboardState, seq: int, message: str = FORECAST_FAILED_MESSAGE) -> DashboardState:
    """Keep the last good series and indicators, surface a retryable error."""
    if not is_current(state, seq):
        return state
    return replace(state, loading=False, error=message)
