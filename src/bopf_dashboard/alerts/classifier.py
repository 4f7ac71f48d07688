"""Field alerts from weather telemetry.

Rules are checked in a fixed priority order and each one fires independently.
The result is never empty: with nothing to report it holds a single
"no critical alerts" entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from bopf_dashboard.config import AlertThresholds
from bopf_dashboard.scenario import ScenarioInput


class AlertKind(Enum):
    HIGH_TEMPERATURE = "HIGH_TEMPERATURE"
    LOW_HUMIDITY = "LOW_HUMIDITY"
    HEAVY_RAIN = "HEAVY_RAIN"
    NONE = "NONE"


@dataclass(frozen=True)
class Alert:
    kind: AlertKind
    message: str

    @property
    def is_critical(self) -> bool:
        return self.kind is not AlertKind.NONE


MESSAGES = {
    AlertKind.HIGH_TEMPERATURE: "High field temperature may tighten supply in 1–2 weeks.",
    AlertKind.LOW_HUMIDITY: "Low humidity suggests dry-stress risk next week.",
    AlertKind.HEAVY_RAIN: "Heavy rainfall may elevate logistics risk and quality variability.",
    AlertKind.NONE: "No critical field alerts this week.",
}


def classify_alerts(
    scenario: ScenarioInput, thresholds: AlertThresholds | None = None
) -> list[Alert]:
    t = thresholds or AlertThresholds()
    kinds: list[AlertKind] = []

    # Absent telemetry never triggers a rule.
    if scenario.temp_mean_c_w is not None and scenario.temp_mean_c_w >= t.temp_high_c:
        kinds.append(AlertKind.HIGH_TEMPERATURE)
    if scenario.humidity_mean_w is not None and scenario.humidity_mean_w <= t.humidity_low_pct:
        kinds.append(AlertKind.LOW_HUMIDITY)
    if scenario.rain_mm_sum_w is not None and scenario.rain_mm_sum_w >= t.rain_heavy_mm:
        kinds.append(AlertKind.HEAVY_RAIN)

    if not kinds:
        kinds.append(AlertKind.NONE)
    return [Alert(kind=k, message=MESSAGES[k]) for k in kinds]
