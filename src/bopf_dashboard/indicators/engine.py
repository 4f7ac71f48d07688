"""Market indicators derived from the merged series and the scenario.

All functions are pure: same series + scenario in, same numbers out. Any
indicator that lacks its inputs is ``None`` rather than a guessed value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from bopf_dashboard.config import PressureConfig
from bopf_dashboard.connectors.schema import CompetitorPoint
from bopf_dashboard.scenario import ScenarioInput
from bopf_dashboard.series import actual_values

TREND_LOOKBACK = 4  # auctions
VOLATILITY_WINDOW = 4


@dataclass(frozen=True)
class Indicators:
    trend_change_pct: Optional[float] = None
    volatility: Optional[float] = None  # population std dev, LKR/kg
    spread_vs_kenya: Optional[float] = None  # LKR/kg
    spread_vs_india: Optional[float] = None  # LKR/kg
    field_pressure_score: Optional[int] = None  # 0..100


def trend_change_pct(series: pd.DataFrame, lookback: int = TREND_LOOKBACK) -> Optional[float]:
    """% change of the latest actual vs the actual ``lookback`` positions earlier."""
    actuals = actual_values(series)
    if len(actuals) < lookback + 1:
        return None
    last, prior = actuals[-1], actuals[-1 - lookback]
    if prior == 0:
        return None
    return (last - prior) / prior * 100.0


def volatility_window(series: pd.DataFrame, window: int = VOLATILITY_WINDOW) -> list[float]:
    """Up to ``window`` actuals immediately before the latest actual (excluded)."""
    actuals = actual_values(series)
    return actuals[:-1][-window:]


def volatility(series: pd.DataFrame, window: int = VOLATILITY_WINDOW) -> Optional[float]:
    sample = volatility_window(series, window)
    if len(sample) < 2:
        return None
    return float(np.std(np.asarray(sample, dtype=float), ddof=0))


def latest_competitor_price(history: Sequence[CompetitorPoint]) -> Optional[float]:
    for point in reversed(history):
        if point.price_usd is not None:
            return point.price_usd
    return None


def competitor_spread(
    last_domestic: Optional[float],
    competitor_usd: Optional[float],
    fx_lkr_per_usd: Optional[float],
) -> Optional[float]:
    """Domestic price minus the competitor price converted at the given FX.

    Competitor prices are converted at the current scenario FX, not the FX of
    the week they were quoted.
    """
    if last_domestic is None or competitor_usd is None or fx_lkr_per_usd is None:
        return None
    return last_domestic - competitor_usd * fx_lkr_per_usd


def _clamp(x: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return min(hi, max(lo, x))


def field_pressure_score(
    temp_c: Optional[float],
    humidity_pct: Optional[float],
    cfg: PressureConfig | None = None,
) -> Optional[int]:
    """Composite short-term supply risk from field telemetry, 0 (calm) to 100.

    Hot weeks and dry air both push the score up; temperature carries 60% of
    the weight by default.
    """
    if temp_c is None or humidity_pct is None:
        return None
    cfg = cfg or PressureConfig()
    norm_t = _clamp((temp_c - cfg.temp_floor_c) / cfg.temp_span_c)
    norm_h = _clamp((cfg.humidity_ceiling_pct - humidity_pct) / cfg.humidity_span_pct)
    score = 100.0 * (cfg.temp_weight * norm_t + cfg.humidity_weight * norm_h)
    return int(min(100, max(0, math.floor(score + 0.5))))


def compute_indicators(
    series: pd.DataFrame,
    kenya_history: Sequence[CompetitorPoint],
    india_history: Sequence[CompetitorPoint],
    scenario: ScenarioInput,
    pressure_cfg: PressureConfig | None = None,
) -> Indicators:
    actuals = actual_values(series)
    last_domestic = actuals[-1] if actuals else None
    fx = scenario.fx_lkr_per_usd_m

    return Indicators(
        trend_change_pct=trend_change_pct(series),
        volatility=volatility(series),
        spread_vs_kenya=competitor_spread(last_domestic, latest_competitor_price(kenya_history), fx),
        spread_vs_india=competitor_spread(last_domestic, latest_competitor_price(india_history), fx),
        field_pressure_score=field_pressure_score(
            scenario.temp_mean_c_w, scenario.humidity_mean_w, pressure_cfg
        ),
    )
