from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import requests

from bopf_dashboard.config import ServicesConfig
from bopf_dashboard.errors import FxFetchFailure

logger = logging.getLogger(__name__)


@dataclass
class FxRateConnector:
    """Fetch the current USD -> LKR rate from an exchangerate-style JSON API.

    Expected body: ``{"rates": {"LKR": 299.87, ...}, ...}``.
    """

    url: str = "https://api.exchangerate.host/latest?base=USD&symbols=LKR"
    symbol: str = "LKR"
    timeout_sec: float = 15.0
    verify_ssl: bool = True

    @classmethod
    def from_config(cls, cfg: ServicesConfig) -> "FxRateConnector":
        return cls(
            url=cfg.fx_url,
            symbol=cfg.fx_symbol,
            timeout_sec=cfg.timeout_sec,
            verify_ssl=cfg.verify_ssl,
        )

    def fetch_rate(self) -> float:
        try:
            resp = requests.get(self.url, timeout=self.timeout_sec, verify=self.verify_ssl)
            resp.raise_for_status()
            data = resp.json()
        except (requests.exceptions.RequestException, ValueError) as exc:
            raise FxFetchFailure(f"FX request failed: {exc}") from exc

        rates = data.get("rates") if isinstance(data, dict) else None
        rate = rates.get(self.symbol) if isinstance(rates, dict) else None
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise FxFetchFailure(f"No {self.symbol} rate in FX response")
        if not math.isfinite(rate) or rate <= 0:
            raise FxFetchFailure(f"Implausible {self.symbol} rate: {rate!r}")

        logger.info(f"Current rate: {rate:.2f} {self.symbol}/USD")
        return float(rate)
