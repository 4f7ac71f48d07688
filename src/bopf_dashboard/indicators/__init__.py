from .engine import (  # noqa
    Indicators,
    competitor_spread,
    compute_indicators,
    field_pressure_score,
    latest_competitor_price,
    trend_change_pct,
    volatility,
    volatility_window,
)

__all__ = [
    "Indicators",
    "competitor_spread",
    "compute_indicators",
    "field_pressure_score",
    "latest_competitor_price",
    "trend_change_pct",
    "volatility",
    "volatility_window",
]
