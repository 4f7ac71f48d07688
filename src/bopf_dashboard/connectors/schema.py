"""Response schema of the forecast service.

The service's field names are mapped to one internal schema here, at the
boundary, so nothing downstream has to guess which key a value lives under.

  history[]        auction_date_start, bopf_price_lkr_per_kg,
                   kenya_bopf_price_usd_w?, india_bopf_price_usd_w?
  forecast         auction_date_start, forecast_price_lkr, confidence?,
                   ci_lower?, ci_upper?
  kenya_history[]  price under kenya_bopf_price_usd_w, or under price
  india_history[]  price under india_bopf_price_usd_w, or under price
"""

from __future__ import annotations

import datetime as dt
from numbers import Real
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class _Point(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)


class HistoryPoint(_Point):
    date: dt.date = Field(validation_alias=AliasChoices("auction_date_start", "date"))
    price_lkr: float = Field(validation_alias=AliasChoices("bopf_price_lkr_per_kg", "price_lkr"))
    kenya_usd: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("kenya_bopf_price_usd_w", "kenya_usd")
    )
    india_usd: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("india_bopf_price_usd_w", "india_usd")
    )


class ForecastPoint(_Point):
    date: dt.date = Field(validation_alias=AliasChoices("auction_date_start", "date"))
    price_lkr: float = Field(validation_alias=AliasChoices("forecast_price_lkr", "price_lkr"))
    confidence: Optional[str] = None
    lower: Optional[float] = Field(default=None, validation_alias=AliasChoices("ci_lower", "lower"))
    upper: Optional[float] = Field(default=None, validation_alias=AliasChoices("ci_upper", "upper"))

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_label(cls, v: Any) -> Any:
        if isinstance(v, Real) and not isinstance(v, bool):
            return str(v)
        return v


class CompetitorPoint(_Point):
    date: Optional[dt.date] = None
    price_usd: Optional[float] = None


def _competitor_entries(raw: Any, price_key: str) -> list[Any]:
    out: list[Any] = []
    for entry in raw or []:
        if isinstance(entry, CompetitorPoint):
            out.append(entry)
            continue
        if not isinstance(entry, dict):
            raise ValueError(f"competitor history entry is not an object: {entry!r}")
        price = entry.get(price_key)
        if price is None:
            price = entry.get("price")
        out.append(
            {
                "date": entry.get("auction_date_start", entry.get("date")),
                "price_usd": price,
            }
        )
    return out


class ForecastResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    history: list[HistoryPoint] = Field(default_factory=list)
    forecast: Optional[ForecastPoint] = None
    kenya_history: list[CompetitorPoint] = Field(default_factory=list)
    india_history: list[CompetitorPoint] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("history") is None:
            data["history"] = []
        data["kenya_history"] = _competitor_entries(data.get("kenya_history"), "kenya_bopf_price_usd_w")
        data["india_history"] = _competitor_entries(data.get("india_history"), "india_bopf_price_usd_w")
        return data
