# src/forecast_select/models/baselines.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..errors import EmptyOverlapError
from ..series import TimeSeries
from .base import Bounds, FittedModel, ForecastAdapter, random_walk_bounds, residual_sigma


class Naive(ForecastAdapter):
    """
    Random-walk forecast: every future value equals the last observation.

    In-sample, each position is "fitted" by the previous observation, so the
    first position is undefined. Bounds follow ± z·σ·√h with σ the standard
    deviation of the one-step differences.
    """
    name = "naive"

    def _fit(self, series: TimeSeries):
        y = series.values
        fitted = np.r_[np.nan, y[:-1]]
        return None, fitted

    def _forecast(self, fitted: FittedModel, horizon: int, levels: Tuple[int, ...]) -> Tuple[np.ndarray, Bounds, Bounds]:
        y = fitted.series.values
        mean = np.full(horizon, y[-1], dtype=float)
        sigma = residual_sigma(y - fitted.fitted)
        lower, upper = random_walk_bounds(mean, sigma, levels)
        return mean, lower, upper


@dataclass
class MovingAverageConfig:
    order: int = 12  # window order W; even orders use the centred 2xW average

    def __post_init__(self) -> None:
        if int(self.order) < 1:
            raise ValueError(f"Moving-average order must be >= 1, got {self.order}")
        self.order = int(self.order)


def centred_weights(order: int) -> np.ndarray:
    if order % 2:
        return np.full(order, 1.0 / order)
    w = np.ones(order + 1)
    w[0] = w[-1] = 0.5
    return w / order


class MovingAverage(ForecastAdapter):
    """
    Centred moving-average smoother.

    The smoothed series is the in-sample fit; it leaves floor(W/2) undefined
    positions at each end. This is a smoother, not a forecaster: the forward
    "forecast" repeats the last defined smoothed value and carries no trend or
    seasonal extrapolation. Keep it in a candidate set for residual inspection.
    """
    name = "moving_average"

    def __init__(self, cfg: MovingAverageConfig | None = None):
        self.cfg = cfg or MovingAverageConfig()

    def _fit(self, series: TimeSeries):
        y = series.values
        w = centred_weights(self.cfg.order)
        fitted = np.full(y.size, np.nan)
        if y.size >= w.size:
            pad = w.size // 2
            fitted[pad:y.size - pad] = np.convolve(y, w, mode="valid")
        return None, fitted

    def _forecast(self, fitted: FittedModel, horizon: int, levels: Tuple[int, ...]) -> Tuple[np.ndarray, Bounds, Bounds]:
        defined = fitted.fitted[np.isfinite(fitted.fitted)]
        if defined.size == 0:
            raise EmptyOverlapError(
                f"moving average of order {self.cfg.order} is undefined everywhere "
                f"on a series of length {len(fitted.series)}"
            )
        mean = np.full(horizon, defined[-1], dtype=float)
        sigma = residual_sigma(fitted.series.values - fitted.fitted)
        lower, upper = random_walk_bounds(mean, sigma, levels)
        return mean, lower, upper
