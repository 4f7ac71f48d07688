"""
Tests for merging history, forecast and competitor prices into one series
"""

import logging
from datetime import date

import pandas as pd

from bopf_dashboard.connectors.schema import ForecastPoint, HistoryPoint
from bopf_dashboard.series import SERIES_COLUMNS, actual_values, merge_series


def _history(prices, kenya=None, india=None):
    out = []
    for i, p in enumerate(prices):
        out.append(
            HistoryPoint(
                date=date(2024, 1, 1 + 7 * i),
                price_lkr=p,
                kenya_usd=kenya[i] if kenya else None,
                india_usd=india[i] if india else None,
            )
        )
    return out


FORECAST = ForecastPoint(date=date(2024, 2, 5), price_lkr=1260.0, confidence="high", lower=1230.0, upper=1290.0)


class TestMergeSeries:

    def test_history_rows_then_one_forecast_row(self):
        df = merge_series(_history([1000, 1050, 1100, 1150, 1200]), FORECAST)

        assert list(df.columns) == SERIES_COLUMNS
        assert len(df) == 6
        assert df["actual"].iloc[:5].tolist() == [1000, 1050, 1100, 1150, 1200]
        assert df["predicted"].iloc[:5].isna().all()
        assert df["lower"].iloc[:5].isna().all()

        last = df.iloc[-1]
        assert last["date"] == date(2024, 2, 5)
        assert pd.isna(last["actual"])
        assert last["predicted"] == 1260.0
        assert last["lower"] == 1230.0
        assert last["upper"] == 1290.0
        assert pd.isna(last["kenya"]) and pd.isna(last["india"])

    def test_competitor_prices_carried_per_row(self):
        df = merge_series(_history([1000, 1010], kenya=[3.0, None], india=[2.5, 2.6]), None)

        assert df["kenya"].iloc[0] == 3.0
        assert pd.isna(df["kenya"].iloc[1])
        assert df["india"].tolist() == [2.5, 2.6]

    def test_no_forecast_is_history_only(self):
        df = merge_series(_history([1000, 1010, 1020]), None)

        assert len(df) == 3
        assert df["predicted"].isna().all()

    def test_empty_history_with_forecast(self):
        df = merge_series([], FORECAST)

        assert len(df) == 1
        row = df.iloc[0]
        assert row["date"] == date(2024, 2, 5)
        assert row["predicted"] == 1260.0
        assert row["lower"] == 1230.0 and row["upper"] == 1290.0
        assert pd.isna(row["actual"]) and pd.isna(row["kenya"]) and pd.isna(row["india"])

    def test_empty_history_no_forecast(self):
        df = merge_series([], None)

        assert df.empty
        assert list(df.columns) == SERIES_COLUMNS

    def test_forecast_without_bounds(self):
        fc = ForecastPoint(date=date(2024, 2, 5), price_lkr=1250.0)
        df = merge_series(_history([1000]), fc)

        assert df["predicted"].iloc[-1] == 1250.0
        assert pd.isna(df["lower"].iloc[-1]) and pd.isna(df["upper"].iloc[-1])

    def test_out_of_order_rows_kept_and_logged(self, caplog):
        history = [
            HistoryPoint(date=date(2024, 1, 15), price_lkr=1100),
            HistoryPoint(date=date(2024, 1, 8), price_lkr=1050),
        ]
        with caplog.at_level(logging.WARNING):
            df = merge_series(history, None)

        assert df["actual"].tolist() == [1100, 1050]
        assert "not ascending" in caplog.text

    def test_actual_values_skip_forecast_row(self):
        df = merge_series(_history([1000, 1050]), FORECAST)
        assert actual_values(df) == [1000.0, 1050.0]
