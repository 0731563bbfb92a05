# src/forecast_select/models/decomposition.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Tuple

import numpy as np
import statsmodels.api as sm
from statsmodels.tsa.seasonal import STL, seasonal_decompose

from ..series import TimeSeries
from .base import Bounds, FittedModel, ForecastAdapter, z_value
from .exp_smoothing import ets_forecast, fit_ets


@dataclass
class STLConfig:
    seasonal: int = 7       # seasonal LOESS window (odd, >= 3)
    robust: bool = False

    def __post_init__(self) -> None:
        if self.seasonal < 3 or self.seasonal % 2 == 0:
            raise ValueError(f"STL seasonal window must be odd and >= 3, got {self.seasonal}")


class STLForecast(ForecastAdapter):
    """
    STL decomposition + SES on the seasonally adjusted series.

    The seasonal component of the last full cycle is added back onto the
    adjusted forecast (and its intervals).
    """
    name = "stl"
    seasonal = True

    def __init__(self, cfg: STLConfig | None = None):
        self.cfg = cfg or STLConfig()

    def _fit(self, series: TimeSeries):
        y = series.values
        decomp = STL(y, period=series.frequency, seasonal=self.cfg.seasonal, robust=self.cfg.robust).fit()
        seasonal = np.asarray(decomp.seasonal, dtype=float)
        adjusted = fit_ets(y - seasonal, error="add", trend=None, seasonal=None)
        fitted = seasonal + np.asarray(adjusted.fittedvalues, dtype=float)
        return (adjusted, seasonal), fitted

    def _forecast(self, fitted: FittedModel, horizon: int, levels: Tuple[int, ...]):
        adjusted, seasonal = fitted.handle
        n, m = len(fitted.series), fitted.series.frequency
        last_cycle = seasonal[n - m:]
        seas = last_cycle[np.arange(horizon) % m]

        mean, lower, upper = ets_forecast(adjusted, n, horizon, levels)
        return (
            mean + seas,
            {lv: b + seas for lv, b in lower.items()},
            {lv: b + seas for lv, b in upper.items()},
        )


@dataclass
class ClassicalTrendConfig:
    model: Literal["additive", "multiplicative"] = "additive"


class ClassicalTrend(ForecastAdapter):
    """
    Linear extrapolation of the classical decomposition's trend component.

    Seasonality and the remainder are ignored entirely, so this is a much
    narrower model than Holt-Winters or STL. Intervals are ordinary
    regression prediction intervals scaled by the spread of actual - line.
    """
    name = "classical_trend"
    seasonal = True

    def __init__(self, cfg: ClassicalTrendConfig | None = None):
        self.cfg = cfg or ClassicalTrendConfig()

    def _fit(self, series: TimeSeries):
        y = series.values
        decomp = seasonal_decompose(y, model=self.cfg.model, period=series.frequency)
        trend = np.asarray(decomp.trend, dtype=float)
        mask = np.isfinite(trend)
        x = np.arange(y.size, dtype=float)

        ols = sm.OLS(trend[mask], _design(x[mask])).fit()
        fitted = ols.predict(_design(x))
        return (ols, x[mask]), fitted

    def _forecast(self, fitted: FittedModel, horizon: int, levels: Tuple[int, ...]):
        ols, x_used = fitted.handle
        n = len(fitted.series)
        x_new = np.arange(n, n + horizon, dtype=float)
        mean = ols.predict(_design(x_new))

        resid = fitted.series.values - fitted.fitted
        sigma = float(np.std(resid, ddof=2)) if resid.size > 2 else 0.0
        xbar = x_used.mean()
        sxx = float(np.sum((x_used - xbar) ** 2))
        scale = np.sqrt(1.0 + 1.0 / x_used.size + (x_new - xbar) ** 2 / sxx)

        lower: Bounds = {}
        upper: Bounds = {}
        for level in levels:
            width = z_value(level) * sigma * scale
            lower[level] = mean - width
            upper[level] = mean + width
        return mean, lower, upper


def _design(x: np.ndarray) -> np.ndarray:
    return np.column_stack([np.ones_like(x), x])
