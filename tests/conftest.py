"""
Pytest configuration and shared fixtures.
Canned forecast-service payloads and fake HTTP responses; no network access.
"""

import os
import sys
from datetime import date, timedelta

import pytest
import requests

# Allow running the suite from a checkout without installing the package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from bopf_dashboard.config import DashboardConfig  # noqa: E402
from bopf_dashboard.connectors.schema import ForecastResponse  # noqa: E402


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload=None, status_code=200, raw_text=None):
        self._payload = payload
        self.status_code = status_code
        self.text = raw_text if raw_text is not None else ""

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._payload is None and self.text:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def weekly_dates(n, start=date(2024, 1, 1)):
    return [start + timedelta(weeks=i) for i in range(n)]


def make_payload(prices=(1000, 1050, 1100, 1150, 1200), forecast_price=1260.0,
                 kenya=(3.0, 3.1), india=(2.7, 2.8)):
    """Raw forecast-service body as the service sends it."""
    dates = weekly_dates(len(prices) + 1)
    history = [
        {
            "auction_date_start": d.isoformat(),
            "bopf_price_lkr_per_kg": p,
            "kenya_bopf_price_usd_w": None,
            "india_bopf_price_usd_w": None,
        }
        for d, p in zip(dates, prices)
    ]
    forecast = None
    if forecast_price is not None:
        forecast = {
            "auction_date_start": dates[-1].isoformat(),
            "forecast_price_lkr": forecast_price,
            "confidence": "medium",
            "ci_lower": forecast_price - 30,
            "ci_upper": forecast_price + 30,
        }
    return {
        "history": history,
        "forecast": forecast,
        "kenya_history": [
            {"auction_date_start": d.isoformat(), "kenya_bopf_price_usd_w": k}
            for d, k in zip(dates, kenya)
        ],
        "india_history": [
            {"auction_date_start": d.isoformat(), "india_bopf_price_usd_w": i}
            for d, i in zip(dates, india)
        ],
    }


def make_response(**kwargs):
    return ForecastResponse.model_validate(make_payload(**kwargs))


class FakeForecastClient:
    """Records submitted scenarios and replays queued responses or errors."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def request_forecast(self, scenario):
        self.calls.append(scenario)
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


class FakeFx:
    def __init__(self, result):
        self.result = result
        self.calls = 0

    def fetch_rate(self):
        self.calls += 1
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def cfg():
    return DashboardConfig()


@pytest.fixture
def payload():
    return make_payload()


@pytest.fixture
def response():
    return make_response()
