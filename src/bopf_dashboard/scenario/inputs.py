"""Scenario inputs submitted to the forecast service.

Field names are the service's wire names so a scenario can be posted as-is.
Every field holds a finite number or ``None`` (explicitly absent).
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from numbers import Real
from typing import Any, Mapping, Optional

from bopf_dashboard.errors import InvalidScenarioEdit


@dataclass(frozen=True)
class ScenarioInput:
    """One complete set of forecast drivers."""

    fx_lkr_per_usd_m: Optional[float] = None
    kenya_bopf_price_usd_w: Optional[float] = None
    india_bopf_price_usd_w: Optional[float] = None
    fob_rs_per_kg_wavg_m: Optional[float] = None
    rain_mm_sum_w: Optional[float] = None  # weekly rainfall, mm
    temp_mean_c_w: Optional[float] = None  # weekly mean temperature, C
    humidity_mean_w: Optional[float] = None  # weekly mean relative humidity, %
    month: Optional[int] = None
    bopf_price_lkr_per_kg_lag1: Optional[float] = None
    bopf_price_lkr_per_kg_lag4: Optional[float] = None
    bopf_price_lkr_per_kg_lag8: Optional[float] = None
    fx_lkr_per_usd_m_lag1: Optional[float] = None
    kenya_bopf_price_usd_w_lag1: Optional[float] = None
    india_bopf_price_usd_w_lag1: Optional[float] = None
    rain_4w_sum: Optional[float] = None
    price_ma4w: Optional[float] = None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ScenarioInput":
        return cls().merged(values)

    def merged(self, partial: Mapping[str, Any]) -> "ScenarioInput":
        """Return a copy with ``partial`` applied; all fields validated first."""
        cleaned = {name: coerce_field(name, value) for name, value in partial.items()}
        return replace(self, **cleaned)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_payload(self) -> dict[str, Any]:
        """Request body for the forecast service; absent fields are omitted."""
        return {k: v for k, v in asdict(self).items() if v is not None}


_FIELD_NAMES = frozenset(ScenarioInput.field_names())


def coerce_field(name: str, value: Any) -> Optional[float]:
    """Validate one edit and return the value to store.

    Numeric strings are accepted (form input); booleans, unparseable text,
    NaN and infinities are rejected.
    """
    if name not in _FIELD_NAMES:
        raise InvalidScenarioEdit(name, value, "unknown field")
    if value is None:
        return None

    if isinstance(value, bool):
        raise InvalidScenarioEdit(name, value, "not a number")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            raise InvalidScenarioEdit(name, value, "not a number") from None
    elif isinstance(value, Real):
        try:
            number = float(value)
        except OverflowError:
            raise InvalidScenarioEdit(name, value, "not finite") from None
    else:
        raise InvalidScenarioEdit(name, value, "not a number")

    if not math.isfinite(number):
        raise InvalidScenarioEdit(name, value, "not finite")

    if name == "month":
        if not number.is_integer() or not 1 <= number <= 12:
            raise InvalidScenarioEdit(name, value, "month must be an integer in 1..12")
        return int(number)
    return number
