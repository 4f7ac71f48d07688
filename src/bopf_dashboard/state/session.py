from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from bopf_dashboard.config import DashboardConfig
from bopf_dashboard.connectors import ForecastClient, ForecastResponse, FxRateConnector
from bopf_dashboard.errors import ForecastRequestFailure, FxFetchFailure
from bopf_dashboard.export import write_csv
from bopf_dashboard.scenario import ScenarioInput, ScenarioStore
from bopf_dashboard.state import app_state
from bopf_dashboard.state.app_state import DashboardState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestTicket:
    seq: int
    scenario: ScenarioInput
    what_if: Optional[dict[str, Any]] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DashboardSession:
    """Single writer of the dashboard state.

    Forecast requests are numbered in issue order. Only the latest issued
    request may update the series; responses for older requests are dropped
    whenever they arrive.
    """

    def __init__(
        self,
        cfg: DashboardConfig | None = None,
        client: ForecastClient | None = None,
        fx: FxRateConnector | None = None,
        store: ScenarioStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.cfg = cfg or DashboardConfig()
        self.client = client or ForecastClient.from_config(self.cfg.services)
        self.fx = fx or FxRateConnector.from_config(self.cfg.services)
        self.store = store or ScenarioStore(ScenarioInput.from_mapping(self.cfg.scenario.resolved()))
        self._clock = clock
        self._lock = threading.RLock()
        self._seq = 0
        self._executor: ThreadPoolExecutor | None = None
        self._state = app_state.initial_state(self.store.get(), self.cfg)

    @property
    def state(self) -> DashboardState:
        with self._lock:
            return self._state

    # -- lifecycle -----------------------------------------------------------

    def start(self, fetch_fx: bool = True) -> DashboardState:
        """One-time FX refresh, then the first forecast."""
        if fetch_fx:
            self.refresh_fx(trigger_forecast=False)
        return self.request_forecast()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "DashboardSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -- scenario --------------------------------------------------------------

    def refresh_fx(self, trigger_forecast: bool = True) -> bool:
        """Overwrite the scenario FX with the live rate. Failures keep the old value."""
        try:
            rate = self.fx.fetch_rate()
        except FxFetchFailure as exc:
            logger.warning(f"FX refresh skipped, keeping {self.store.get().fx_lkr_per_usd_m}: {exc}")
            return False

        with self._lock:
            before = self.store.get().fx_lkr_per_usd_m
            scenario = self.store.set_fx(rate)
            self._state = app_state.scenario_changed(
                self._state, scenario, self.cfg, edited=("fx_lkr_per_usd_m",)
            )
        changed = scenario.fx_lkr_per_usd_m != before
        if changed and trigger_forecast and self.cfg.session.auto_refresh_on_fx_change:
            self.request_forecast()
        return True

    def edit(self, partial: Mapping[str, Any]) -> DashboardState:
        """Apply a validated scenario edit; an FX change refreshes the forecast."""
        with self._lock:
            before = self.store.get()
            scenario = self.store.set(partial)
            self._state = app_state.scenario_changed(
                self._state, scenario, self.cfg, edited=partial.keys()
            )
        # A blanked FX is a change but leaves nothing to forecast with.
        if (
            scenario.fx_lkr_per_usd_m is not None
            and scenario.fx_lkr_per_usd_m != before.fx_lkr_per_usd_m
            and self.cfg.session.auto_refresh_on_fx_change
        ):
            return self.request_forecast()
        return self.state

    # -- forecast requests ---------------------------------------------------

    def begin_request(self, what_if: Mapping[str, Any] | None = None) -> RequestTicket:
        # Validate before numbering so a bad override is never submitted.
        scenario = self.store.with_override(what_if)
        with self._lock:
            self._seq += 1
            ticket = RequestTicket(
                seq=self._seq, scenario=scenario, what_if=dict(what_if) if what_if else None
            )
            self._state = app_state.request_issued(self._state, ticket.seq)
        logger.info(f"Forecast request #{ticket.seq} issued{' (what-if)' if what_if else ''}")
        return ticket

    def complete(self, ticket: RequestTicket, response: ForecastResponse) -> bool:
        with self._lock:
            if not app_state.is_current(self._state, ticket.seq):
                logger.debug(
                    f"Discarding response #{ticket.seq}; superseded by #{self._state.latest_seq}"
                )
                return False
            self._state = app_state.response_received(
                self._state, ticket.seq, response, ticket.what_if, self.cfg, self._clock()
            )
        return True

    def fail(self, ticket: RequestTicket, error: Exception) -> bool:
        with self._lock:
            if not app_state.is_current(self._state, ticket.seq):
                logger.debug(f"Ignoring failure of superseded request #{ticket.seq}: {error}")
                return False
            self._state = app_state.request_failed(self._state, ticket.seq)
        logger.error(f"Forecast request #{ticket.seq} failed: {error}")
        return True

    def _execute(self, ticket: RequestTicket) -> DashboardState:
        try:
            response = self.client.request_forecast(ticket.scenario)
        except ForecastRequestFailure as exc:
            self.fail(ticket, exc)
        except Exception as exc:
            # Clear loading for the ticket, then let the caller (or Future) see it.
            self.fail(ticket, exc)
            raise
        else:
            self.complete(ticket, response)
        return self.state

    def request_forecast(self, what_if: Mapping[str, Any] | None = None) -> DashboardState:
        return self._execute(self.begin_request(what_if))

    def run_what_if(self, override: Mapping[str, Any]) -> DashboardState:
        """Forecast a transient scenario; the stored baseline is untouched."""
        return self.request_forecast(override)

    def submit(self, what_if: Mapping[str, Any] | None = None) -> Future:
        """Non-blocking request. The ticket is numbered now, in call order."""
        ticket = self.begin_request(what_if)
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.cfg.session.max_workers, thread_name_prefix="forecast"
                )
            executor = self._executor
        return executor.submit(self._execute, ticket)

    # -- export ----------------------------------------------------------------

    def export_csv(self, output_path: str | Path | None = None) -> Path:
        return write_csv(self.state.series, output_path or self.cfg.export.filename)
