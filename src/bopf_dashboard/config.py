from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure the root logger once at startup (CLI entry point)."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


class ServicesConfig(BaseModel):
    forecast_url: str = "http://127.0.0.1:5000/forecast"
    fx_url: str = "https://api.exchangerate.host/latest?base=USD&symbols=LKR"
    fx_symbol: str = "LKR"
    timeout_sec: float = 15.0
    verify_ssl: bool = True


class ScenarioDefaults(BaseModel):
    """Starting values of the what-if panel."""

    fx_lkr_per_usd_m: Optional[float] = 300.0
    kenya_bopf_price_usd_w: Optional[float] = 3.1
    india_bopf_price_usd_w: Optional[float] = 2.8
    fob_rs_per_kg_wavg_m: Optional[float] = 1250.0
    rain_mm_sum_w: Optional[float] = 60.0
    temp_mean_c_w: Optional[float] = 22.0
    humidity_mean_w: Optional[float] = 82.0
    # None means "current calendar month" at session start.
    month: Optional[int] = Field(default=None, ge=1, le=12)
    bopf_price_lkr_per_kg_lag1: Optional[float] = 1220.0
    bopf_price_lkr_per_kg_lag4: Optional[float] = 1190.0
    bopf_price_lkr_per_kg_lag8: Optional[float] = 1180.0
    fx_lkr_per_usd_m_lag1: Optional[float] = 298.0
    kenya_bopf_price_usd_w_lag1: Optional[float] = 3.0
    india_bopf_price_usd_w_lag1: Optional[float] = 2.7
    rain_4w_sum: Optional[float] = 240.0
    price_ma4w: Optional[float] = 1210.0

    def resolved(self, today: date | None = None) -> dict[str, float | int | None]:
        values = self.model_dump()
        if values["month"] is None:
            values["month"] = (today or date.today()).month
        return values


class AlertThresholds(BaseModel):
    temp_high_c: float = 27.0
    humidity_low_pct: float = 70.0
    rain_heavy_mm: float = 120.0


class PressureConfig(BaseModel):
    # Temperature is normalized over [temp_floor_c, temp_floor_c + temp_span_c];
    # humidity pressure grows as it drops below humidity_ceiling_pct.
    temp_floor_c: float = 18.0
    temp_span_c: float = Field(default=10.0, gt=0)
    humidity_ceiling_pct: float = 85.0
    humidity_span_pct: float = Field(default=20.0, gt=0)
    temp_weight: float = Field(default=0.6, ge=0, le=1)
    humidity_weight: float = Field(default=0.4, ge=0, le=1)


class SessionConfig(BaseModel):
    auto_refresh_on_fx_change: bool = True
    max_workers: int = Field(default=2, ge=1)


class ExportConfig(BaseModel):
    filename: str = "bopf_dashboard_export.csv"


class ProjectMeta(BaseModel):
    name: str = "bopf-dashboard"


class DashboardConfig(BaseModel):
    project: ProjectMeta = ProjectMeta()
    services: ServicesConfig = ServicesConfig()
    scenario: ScenarioDefaults = ScenarioDefaults()
    alerts: AlertThresholds = AlertThresholds()
    pressure: PressureConfig = PressureConfig()
    session: SessionConfig = SessionConfig()
    export: ExportConfig = ExportConfig()


def load_config(path: str | Path) -> DashboardConfig:
    path = Path(path)
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return DashboardConfig.model_validate(data)
