"""
Forecast adapters: shape invariants, flat-line properties, seasonal guards.
"""

import numpy as np
import pytest

from forecast_select import EmptyOverlapError, InsufficientDataError, InvalidHorizonError, InvalidSeriesError, TimeSeries
from forecast_select.eval.metrics import score
from forecast_select.models.exp_smoothing import ets_forecast, fit_ets
from forecast_select.models import (
    ClassicalTrend,
    HoltWinters,
    HoltWintersConfig,
    MovingAverage,
    MovingAverageConfig,
    Naive,
    SimpleExpSmoothing,
    STLForecast,
)

ALL_ADAPTERS = [Naive, lambda: MovingAverage(MovingAverageConfig(order=12)), SimpleExpSmoothing,
                HoltWinters, STLForecast, ClassicalTrend]
SEASONAL_ADAPTERS = [HoltWinters, STLForecast, ClassicalTrend]


class TestForecastShape:

    @pytest.mark.parametrize("make", ALL_ADAPTERS)
    def test_lengths(self, make, trend_seasonal):
        adapter = make()
        result = adapter.forecast(adapter.fit(trend_seasonal), 12)
        assert result.fitted.shape == (len(trend_seasonal),)
        assert result.mean.shape == (12,)
        assert result.horizon == 12
        assert result.levels == [80, 95]
        for level in (80, 95):
            assert result.lower[level].shape == (12,)
            assert result.upper[level].shape == (12,)

    @pytest.mark.parametrize("make", ALL_ADAPTERS)
    def test_bounds_bracket_mean(self, make, trend_seasonal):
        adapter = make()
        result = adapter.forecast(adapter.fit(trend_seasonal), 6)
        assert np.all(result.lower[95] <= result.mean + 1e-9)
        assert np.all(result.upper[95] >= result.mean - 1e-9)
        assert np.all(result.lower[95] <= result.lower[80] + 1e-9)

    def test_forecast_frame_starts_after_last_observation(self, trend_seasonal):
        adapter = Naive()
        frame = adapter.forecast(adapter.fit(trend_seasonal), 3).to_frame()
        assert list(frame.index) == ["2020-01", "2020-02", "2020-03"]
        assert list(frame.columns) == ["mean", "lower_80", "upper_80", "lower_95", "upper_95"]

    def test_fitted_frame_has_residuals(self, trend_seasonal):
        adapter = Naive()
        frame = adapter.forecast(adapter.fit(trend_seasonal), 1).fitted_frame()
        assert list(frame.columns) == ["actual", "fitted", "residual"]
        assert frame["residual"].iloc[1] == pytest.approx(trend_seasonal.value_at(1) - trend_seasonal.value_at(0))

    @pytest.mark.parametrize("horizon", [0, -3])
    def test_non_positive_horizon(self, horizon, trend_seasonal):
        adapter = Naive()
        with pytest.raises(InvalidHorizonError):
            adapter.forecast(adapter.fit(trend_seasonal), horizon)

    def test_cannot_forecast_from_foreign_fit(self, trend_seasonal):
        fitted = Naive().fit(trend_seasonal)
        with pytest.raises(ValueError):
            SimpleExpSmoothing().forecast(fitted, 3)


class TestNaive:

    def test_flat_at_last_value(self, trend_seasonal):
        adapter = Naive()
        result = adapter.forecast(adapter.fit(trend_seasonal), 5)
        np.testing.assert_allclose(result.mean, trend_seasonal.value_at(-1))

    def test_fitted_is_previous_observation(self, trend_seasonal):
        fitted = Naive().fit(trend_seasonal).fitted
        assert np.isnan(fitted[0])
        np.testing.assert_allclose(fitted[1:], trend_seasonal.values[:-1])

    def test_interval_grows_with_sqrt_step(self, trend_seasonal):
        adapter = Naive()
        result = adapter.forecast(adapter.fit(trend_seasonal), 9)
        width = result.upper[95] - result.mean
        assert width[3] == pytest.approx(2 * width[0])
        assert width[8] == pytest.approx(3 * width[0])

    def test_constant_series_scores_zero(self, constant_series):
        fitted = Naive().fit(constant_series)
        assert score(constant_series, fitted.fitted) == 0.0


class TestFlatLineIdempotence:

    @pytest.mark.parametrize("make", [Naive, SimpleExpSmoothing])
    def test_longer_horizon_keeps_prefix(self, make, trend_seasonal):
        adapter = make()
        fitted = adapter.fit(trend_seasonal)
        long = adapter.forecast(fitted, 12)
        short = adapter.forecast(fitted, 6)
        np.testing.assert_allclose(long.mean[:6], short.mean)

    def test_ses_forecast_is_flat(self, trend_seasonal):
        adapter = SimpleExpSmoothing()
        result = adapter.forecast(adapter.fit(trend_seasonal), 8)
        np.testing.assert_allclose(result.mean, result.mean[0])
        width = result.upper[95] - result.mean
        assert width[-1] > width[0]


class TestMovingAverage:

    @pytest.mark.parametrize("order, edge", [(12, 6), (5, 2), (4, 2), (3, 1)])
    def test_edge_gaps(self, order, edge, trend_seasonal):
        fitted = MovingAverage(MovingAverageConfig(order=order)).fit(trend_seasonal).fitted
        assert np.all(np.isnan(fitted[:edge]))
        assert np.all(np.isnan(fitted[-edge:]))
        assert np.all(np.isfinite(fitted[edge:-edge]))

    def test_odd_order_is_plain_centred_mean(self):
        ts = TimeSeries([1.0, 2.0, 6.0, 4.0, 5.0])
        fitted = MovingAverage(MovingAverageConfig(order=3)).fit(ts).fitted
        np.testing.assert_allclose(fitted[1:4], [3.0, 4.0, 5.0])

    def test_two_by_twelve_removes_sinusoidal_season(self, clean_trend_seasonal):
        fitted = MovingAverage(MovingAverageConfig(order=12)).fit(clean_trend_seasonal).fitted
        t = np.arange(len(clean_trend_seasonal))
        np.testing.assert_allclose(fitted[6:-6], (100.0 + 2.0 * t)[6:-6], atol=1e-8)

    def test_window_longer_than_series(self):
        ts = TimeSeries(np.arange(10.0))
        adapter = MovingAverage(MovingAverageConfig(order=15))
        fitted = adapter.fit(ts)
        assert np.all(np.isnan(fitted.fitted))
        with pytest.raises(EmptyOverlapError):
            score(ts, fitted.fitted)
        with pytest.raises(EmptyOverlapError):
            adapter.forecast(fitted, 3)

    def test_invalid_order(self):
        with pytest.raises(ValueError):
            MovingAverageConfig(order=0)


class TestSeasonalAdapters:

    @pytest.mark.parametrize("make", SEASONAL_ADAPTERS)
    def test_short_series_rejected(self, make, short_series):
        with pytest.raises(InsufficientDataError):
            make().fit(short_series)

    def test_non_seasonal_frequency_rejected(self):
        ts = TimeSeries(np.arange(1.0, 40.0), frequency=1)
        with pytest.raises(InsufficientDataError):
            HoltWinters().fit(ts)

    def test_holt_winters_tracks_trend_and_season(self, trend_seasonal):
        adapter = HoltWinters()
        fitted = adapter.fit(trend_seasonal)
        assert score(trend_seasonal, fitted.fitted) < score(trend_seasonal, Naive().fit(trend_seasonal).fitted)
        result = adapter.forecast(fitted, 12)
        expected = 100.0 + 2.0 * np.arange(60, 72) + 10.0 * np.sin(2 * np.pi * np.arange(60, 72) / 12)
        assert np.max(np.abs(result.mean - expected)) < 5.0

    def test_multiplicative_needs_positive_data(self):
        ts = TimeSeries(np.sin(np.arange(36.0)), frequency=12)
        with pytest.raises(InvalidSeriesError):
            HoltWinters(HoltWintersConfig(seasonal="mul")).fit(ts)

    def test_multiplicative_forecast(self, trend_seasonal):
        adapter = HoltWinters(HoltWintersConfig(seasonal="mul"))
        result = adapter.forecast(adapter.fit(trend_seasonal), 12)
        assert result.mean.shape == (12,)
        assert np.all(np.isfinite(result.lower[80]))

    def test_holt_winters_config_validation(self):
        with pytest.raises(ValueError):
            HoltWintersConfig(seasonal="both")

    def test_stl_reapplies_last_seasonal_cycle(self, trend_seasonal):
        adapter = STLForecast()
        result = adapter.forecast(adapter.fit(trend_seasonal), 24)
        # the flat adjusted forecast plus a repeating seasonal pattern: period-12 differences vanish
        np.testing.assert_allclose(result.mean[12:], result.mean[:12], atol=1e-8)

    def test_classical_trend_extrapolates_line(self, clean_trend_seasonal):
        adapter = ClassicalTrend()
        result = adapter.forecast(adapter.fit(clean_trend_seasonal), 12)
        np.testing.assert_allclose(result.mean, 100.0 + 2.0 * np.arange(60, 72), atol=1e-6)

    def test_classical_trend_ignores_season(self, clean_trend_seasonal):
        fitted = ClassicalTrend().fit(clean_trend_seasonal).fitted
        assert np.all(np.isfinite(fitted))
        np.testing.assert_allclose(np.diff(fitted), 2.0, atol=1e-6)


class TestETSPredictions:

    def test_interval_forecast_from_plain_values(self):
        res = fit_ets(np.arange(1.0, 40.0), error="add", trend=None, seasonal=None)
        mean, lower, upper = ets_forecast(res, 39, 3, (80, 95))
        assert mean.shape == (3,)
        assert set(lower) == set(upper) == {80, 95}
        assert np.all(lower[95] <= mean) and np.all(mean <= upper[95])

    def test_multiplicative_intervals_are_seeded(self, trend_seasonal):
        adapter = HoltWinters(HoltWintersConfig(seasonal="mul", random_state=3))
        fitted = adapter.fit(trend_seasonal)
        first = adapter.forecast(fitted, 6)
        second = adapter.forecast(fitted, 6)
        np.testing.assert_allclose(first.lower[95], second.lower[95])
        np.testing.assert_allclose(first.upper[80], second.upper[80])
