"""Synthetic monthly series shared across the test suite."""

import numpy as np
import pytest

from forecast_select import TimeSeries


def trend_seasonal_values(n=60, slope=2.0, amplitude=10.0, noise=0.0, seed=0):
    t = np.arange(n, dtype=float)
    y = 100.0 + slope * t + amplitude * np.sin(2 * np.pi * t / 12)
    if noise:
        y = y + np.random.default_rng(seed).normal(0.0, noise, size=n)
    return y


@pytest.fixture
def trend_seasonal():
    """60 months, linear upward trend, ±10 seasonal swing, small noise."""
    return TimeSeries(trend_seasonal_values(noise=1.0), start=(2015, 1), frequency=12, name="spend")


@pytest.fixture
def clean_trend_seasonal():
    """Same shape as trend_seasonal without noise."""
    return TimeSeries(trend_seasonal_values(), start=(2015, 1), frequency=12, name="spend")


@pytest.fixture
def short_series():
    """18 months: fewer than two full seasonal cycles."""
    return TimeSeries(trend_seasonal_values(n=18, noise=1.0), start=(2015, 1), frequency=12)


@pytest.fixture
def constant_series():
    return TimeSeries(np.full(36, 42.0), start=(2015, 1), frequency=12)


@pytest.fixture
def spend_csv(tmp_path):
    """CSV with a month column and an ad-spend column, rows deliberately unsorted."""
    import pandas as pd

    values = trend_seasonal_values(noise=1.0)
    df = pd.DataFrame({
        "month": pd.date_range("2015-01-01", periods=values.size, freq="MS").strftime("%Y-%m-%d"),
        "spend": values,
    })
    path = tmp_path / "ad_spend.csv"
    df.iloc[::-1].to_csv(path, index=False)
    return path
