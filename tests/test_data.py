"""Loading series from disk and exploratory diagnostics."""

import numpy as np
import pandas as pd
import pytest

from forecast_select import InsufficientDataError, TimeSeries
from forecast_select.data import adf_unit_root_test, autocorrelation, decompose, load_series, load_timeseries, parse_start


class TestLoaders:

    def test_infers_columns_and_sorts(self, spend_csv):
        df = load_timeseries(spend_csv)
        assert list(df.columns) == ["ds", "y"]
        assert df["ds"].is_monotonic_increasing
        assert len(df) == 60

    def test_load_series_reads_start(self, spend_csv):
        ts = load_series(spend_csv, value_col="spend")
        assert ts.start == (2015, 1)
        assert ts.frequency == 12
        assert ts.name == "spend"
        assert len(ts) == 60

    def test_explicit_start_wins(self, spend_csv):
        ts = load_series(spend_csv, start=(2001, 6))
        assert ts.period_label(0) == "2001-06"

    def test_drops_unparseable_rows(self, tmp_path):
        path = tmp_path / "dirty.csv"
        pd.DataFrame({"date": ["2020-01-01", "2020-02-01", "2020-03-01"],
                      "value": ["1.5", "n/a", "3.0"]}).to_csv(path, index=False)
        ts = load_series(path)
        np.testing.assert_allclose(ts.values, [1.5, 3.0])

    def test_uninferable_columns(self, tmp_path):
        path = tmp_path / "odd.csv"
        pd.DataFrame({"a": [1], "b": [2]}).to_csv(path, index=False)
        with pytest.raises(ValueError):
            load_timeseries(path)

    def test_unknown_extension(self, tmp_path):
        with pytest.raises(ValueError):
            load_timeseries(tmp_path / "data.xlsx")

    @pytest.mark.parametrize("text, expected", [("2015-03", (2015, 3)), ("2015.3", (2015, 3)),
                                                ("2015Q2", (2015, 2)), ("2015", (2015, 1))])
    def test_parse_start(self, text, expected):
        assert parse_start(text) == expected


class TestDiagnostics:

    @pytest.mark.parametrize("method", ["classical", "stl"])
    def test_decompose_adds_back_up(self, method, trend_seasonal):
        parts = decompose(trend_seasonal, method=method)
        assert list(parts.columns) == ["observed", "trend", "seasonal", "resid"]
        rebuilt = (parts["trend"] + parts["seasonal"] + parts["resid"]).dropna()
        np.testing.assert_allclose(rebuilt, parts["observed"].loc[rebuilt.index])

    def test_classical_trend_has_edge_gaps(self, trend_seasonal):
        parts = decompose(trend_seasonal, method="classical")
        assert parts["trend"].isna().sum() == 12

    def test_decompose_needs_two_cycles(self, short_series):
        with pytest.raises(InsufficientDataError):
            decompose(short_series)

    def test_stl_is_additive_only(self, trend_seasonal):
        with pytest.raises(ValueError):
            decompose(trend_seasonal, method="stl", model="multiplicative")

    def test_autocorrelation_peaks_at_seasonal_lag(self, clean_trend_seasonal):
        detrended = TimeSeries(clean_trend_seasonal.values - 2.0 * np.arange(60), frequency=12)
        acf = autocorrelation(detrended, nlags=24)
        assert acf.iloc[0] == pytest.approx(1.0)
        assert len(acf) == 25
        assert acf.iloc[12] > acf.iloc[6]

    def test_adf_distinguishes_random_walk(self):
        rng = np.random.default_rng(7)
        noise = rng.normal(size=300)
        assert adf_unit_root_test(np.cumsum(noise).tolist())["has_unit_root"] is True
        assert adf_unit_root_test(noise.tolist())["has_unit_root"] is False
