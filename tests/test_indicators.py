"""
Tests for trend, volatility, competitor spread and field pressure indicators
"""

import math
from datetime import date, timedelta

import pytest

from bopf_dashboard.config import PressureConfig
from bopf_dashboard.connectors.schema import CompetitorPoint, ForecastPoint, HistoryPoint
from bopf_dashboard.indicators import (
    competitor_spread,
    compute_indicators,
    field_pressure_score,
    latest_competitor_price,
    trend_change_pct,
    volatility,
    volatility_window,
)
from bopf_dashboard.scenario import ScenarioInput
from bopf_dashboard.series import merge_series


def series_of(prices, with_forecast=True):
    start = date(2024, 1, 1)
    history = [HistoryPoint(date=start + timedelta(weeks=i), price_lkr=p) for i, p in enumerate(prices)]
    fc = None
    if with_forecast:
        fc = ForecastPoint(date=start + timedelta(weeks=len(prices)), price_lkr=9999.0)
    return merge_series(history, fc)


class TestTrendChange:

    def test_four_week_change(self):
        assert trend_change_pct(series_of([1000, 1050, 1100, 1150, 1200])) == pytest.approx(20.0)

    def test_uses_latest_five_actuals_only(self):
        s = series_of([500, 1000, 1050, 1100, 1150, 1200])
        assert trend_change_pct(s) == pytest.approx(20.0)

    def test_fewer_than_five_actuals_is_none(self):
        assert trend_change_pct(series_of([1000, 1050, 1100, 1150])) is None

    def test_forecast_row_is_ignored(self):
        with_fc = series_of([1000, 1050, 1100, 1150, 1200], with_forecast=True)
        without = series_of([1000, 1050, 1100, 1150, 1200], with_forecast=False)
        assert trend_change_pct(with_fc) == trend_change_pct(without)

    def test_negative_change(self):
        assert trend_change_pct(series_of([1250, 1240, 1230, 1220, 1000])) == pytest.approx(-20.0)

    def test_zero_prior_is_none(self):
        assert trend_change_pct(series_of([0, 1, 2, 3, 4])) is None


class TestVolatility:

    def test_window_excludes_latest_actual(self):
        s = series_of([900, 1000, 1050, 1100, 1150, 1200])
        assert volatility_window(s) == [1000, 1050, 1100, 1150]

    def test_population_std_dev(self):
        s = series_of([1000, 1050, 1100, 1150, 1200])
        assert volatility(s) == pytest.approx(math.sqrt(3125.0))

    def test_two_samples_is_enough(self):
        s = series_of([1000, 1100, 5000])
        assert volatility(s) == pytest.approx(50.0)

    def test_fewer_than_two_samples_is_none(self):
        assert volatility(series_of([1000, 1100])) is None
        assert volatility(series_of([])) is None

    def test_shift_invariant(self):
        base = [1000, 1040, 1090, 1130, 1200]
        shifted = [p + 250 for p in base]
        assert volatility(series_of(shifted)) == pytest.approx(volatility(series_of(base)))

    def test_scales_linearly(self):
        base = [1000, 1040, 1090, 1130, 1200]
        scaled = [p * 3 for p in base]
        assert volatility(series_of(scaled)) == pytest.approx(3 * volatility(series_of(base)))


class TestCompetitorSpread:

    def test_spread_at_current_fx(self):
        assert competitor_spread(1200.0, 3.1, 300.0) == pytest.approx(270.0)

    @pytest.mark.parametrize("args", [(None, 3.1, 300.0), (1200.0, None, 300.0), (1200.0, 3.1, None)])
    def test_missing_side_is_none(self, args):
        assert competitor_spread(*args) is None

    def test_latest_competitor_price_skips_trailing_gaps(self):
        feed = [
            CompetitorPoint(date=date(2024, 1, 1), price_usd=3.0),
            CompetitorPoint(date=date(2024, 1, 8), price_usd=3.2),
            CompetitorPoint(date=date(2024, 1, 15), price_usd=None),
        ]
        assert latest_competitor_price(feed) == 3.2
        assert latest_competitor_price([]) is None


class TestFieldPressure:

    def test_reference_values(self):
        assert field_pressure_score(22, 82) == 30
        assert field_pressure_score(27, 82) == 60
        assert field_pressure_score(18, 85) == 0
        assert field_pressure_score(28, 65) == 100

    def test_clamped_outside_bands(self):
        assert field_pressure_score(40, 10) == 100
        assert field_pressure_score(5, 99) == 0

    def test_missing_input_is_none(self):
        assert field_pressure_score(None, 80) is None
        assert field_pressure_score(25, None) is None

    def test_range_and_monotonicity(self):
        temps = [18 + 0.5 * i for i in range(21)]
        hums = [65 + 1.0 * i for i in range(21)]
        for h in hums:
            scores = [field_pressure_score(t, h) for t in temps]
            assert all(0 <= s <= 100 for s in scores)
            assert scores == sorted(scores)
        for t in temps:
            scores = [field_pressure_score(t, h) for h in hums]
            assert scores == sorted(scores, reverse=True)

    def test_returns_int(self):
        assert isinstance(field_pressure_score(23.3, 77.7), int)

    def test_custom_weights(self):
        cfg = PressureConfig(temp_weight=1.0, humidity_weight=0.0)
        assert field_pressure_score(23, 60, cfg) == 50


class TestComputeIndicators:

    def test_all_indicators(self, response):
        series = merge_series(response.history, response.forecast)
        scenario = ScenarioInput(fx_lkr_per_usd_m=300.0, temp_mean_c_w=22.0, humidity_mean_w=82.0)

        ind = compute_indicators(series, response.kenya_history, response.india_history, scenario)

        assert ind.trend_change_pct == pytest.approx(20.0)
        assert ind.volatility == pytest.approx(math.sqrt(3125.0))
        assert ind.spread_vs_kenya == pytest.approx(1200 - 3.1 * 300)
        assert ind.spread_vs_india == pytest.approx(1200 - 2.8 * 300)
        assert ind.field_pressure_score == 30

    def test_each_indicator_nullable_independently(self):
        series = series_of([1000, 1100], with_forecast=False)
        ind = compute_indicators(series, [], [], ScenarioInput(temp_mean_c_w=27.0, humidity_mean_w=82.0))

        assert ind.trend_change_pct is None
        assert ind.volatility is None
        assert ind.spread_vs_kenya is None
        assert ind.spread_vs_india is None
        assert ind.field_pressure_score == 60

    def test_spread_follows_scenario_fx(self, response):
        series = merge_series(response.history, response.forecast)
        low = compute_indicators(series, response.kenya_history, [], ScenarioInput(fx_lkr_per_usd_m=300.0))
        high = compute_indicators(series, response.kenya_history, [], ScenarioInput(fx_lkr_per_usd_m=330.0))

        assert high.spread_vs_kenya == pytest.approx(low.spread_vs_kenya - 3.1 * 30)
