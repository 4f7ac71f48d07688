"""Client for the external BOPF price forecasting service.

The service takes the scenario drivers as a JSON body and returns the recent
auction history, a single-week forecast and competitor reference histories.
A failed call raises ForecastRequestFailure; retrying is up to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests
from pydantic import ValidationError

from bopf_dashboard.config import ServicesConfig
from bopf_dashboard.connectors.schema import ForecastResponse
from bopf_dashboard.errors import ForecastRequestFailure
from bopf_dashboard.scenario import ScenarioInput

logger = logging.getLogger(__name__)


@dataclass
class ForecastClient:
    """POST a scenario to the forecast endpoint and parse the response.

    Attributes:
        url: forecast endpoint
        timeout_sec: HTTP request timeout in seconds
        verify_ssl: whether to verify SSL certificates
    """

    url: str = "http://127.0.0.1:5000/forecast"
    timeout_sec: float = 15.0
    verify_ssl: bool = True

    @classmethod
    def from_config(cls, cfg: ServicesConfig) -> "ForecastClient":
        return cls(url=cfg.forecast_url, timeout_sec=cfg.timeout_sec, verify_ssl=cfg.verify_ssl)

    def request_forecast(self, scenario: ScenarioInput) -> ForecastResponse:
        payload = scenario.to_payload()
        logger.debug(f"POST {self.url} with {len(payload)} scenario fields")

        try:
            resp = requests.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_sec,
                verify=self.verify_ssl,
            )
            resp.raise_for_status()
        except requests.exceptions.RequestException as exc:
            raise ForecastRequestFailure(f"Forecast request failed: {exc}") from exc

        try:
            body = resp.json()
        except ValueError as exc:
            raise ForecastRequestFailure("Forecast service returned a non-JSON body") from exc

        if body is None:
            body = {}
        if not isinstance(body, dict):
            raise ForecastRequestFailure(
                f"Forecast service returned {type(body).__name__}, expected an object"
            )

        try:
            parsed = ForecastResponse.model_validate(body)
        except (ValidationError, ValueError) as exc:
            raise ForecastRequestFailure(f"Malformed forecast response: {exc}") from exc

        logger.info(
            f"Forecast received: {len(parsed.history)} history rows, "
            f"forecast={'yes' if parsed.forecast else 'no'}, "
            f"kenya={len(parsed.kenya_history)}, india={len(parsed.india_history)}"
        )
        return parsed
