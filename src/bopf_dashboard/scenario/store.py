from __future__ import annotations

import logging
from typing import Any, Mapping

from bopf_dashboard.scenario.inputs import ScenarioInput

logger = logging.getLogger(__name__)


class ScenarioStore:
    """Holds the baseline scenario for the session.

    Writes replace the whole (immutable) ScenarioInput, so readers never see a
    half-applied edit. A rejected edit leaves the store untouched.
    """

    def __init__(self, initial: ScenarioInput | Mapping[str, Any] | None = None):
        if initial is None:
            initial = ScenarioInput()
        elif not isinstance(initial, ScenarioInput):
            initial = ScenarioInput.from_mapping(initial)
        self._current = initial

    def get(self) -> ScenarioInput:
        return self._current

    def set(self, partial: Mapping[str, Any]) -> ScenarioInput:
        updated = self._current.merged(partial)
        if updated != self._current:
            logger.debug(f"Scenario updated: {sorted(partial)}")
        self._current = updated
        return updated

    def with_override(self, partial: Mapping[str, Any] | None) -> ScenarioInput:
        """Transient what-if view; the stored baseline is not modified."""
        if not partial:
            return self._current
        return self._current.merged(partial)

    def set_fx(self, rate: float) -> ScenarioInput:
        return self.set({"fx_lkr_per_usd_m": round(rate)})
