# src/forecast_select/models/exp_smoothing.py
from __future__ import annotations
import inspect
import warnings
from dataclasses import dataclass
from typing import Any, Literal, Optional, Tuple

import numpy as np
import pandas as pd
from statsmodels.tools.sm_exceptions import ConvergenceWarning
from statsmodels.tsa.exponential_smoothing.ets import ETSModel, ETSResults

from ..errors import InvalidSeriesError
from ..series import TimeSeries
from .base import Bounds, FittedModel, ForecastAdapter, alpha_for, frame_bounds

# statsmodels 0.15 renamed the simulation seed keyword from random_state to rng
SEED_KEYWORD = "rng" if "rng" in inspect.signature(ETSResults.simulate).parameters else "random_state"


def fit_ets(y: np.ndarray, **model_kwargs: Any):
    """Fit a statsmodels ETS state-space model, silencing optimiser chatter."""
    # RangeIndex endog: get_prediction needs an index on the predicted mean
    model = ETSModel(pd.Series(np.asarray(y, dtype=float)), initialization_method="estimated", **model_kwargs)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", ConvergenceWarning)
        warnings.simplefilter("ignore", RuntimeWarning)
        return model.fit(disp=False)


def ets_forecast(res: Any, n_obs: int, horizon: int, levels: Tuple[int, ...], **pred_kwargs: Any) -> Tuple[np.ndarray, Bounds, Bounds]:
    """Point forecasts plus prediction intervals for steps n_obs .. n_obs+horizon-1."""
    if not levels:
        return np.asarray(res.forecast(horizon), dtype=float), {}, {}
    pred = res.get_prediction(start=n_obs, end=n_obs + horizon - 1, **pred_kwargs)
    frames = {lv: pred.summary_frame(alpha=alpha_for(lv)) for lv in levels}
    mean = np.asarray(frames[levels[0]]["mean"], dtype=float)
    lower, upper = frame_bounds(frames, "pi_lower", "pi_upper")
    return mean, lower, upper


class SimpleExpSmoothing(ForecastAdapter):
    """ETS(A,N,N): flat forecast at the last smoothed level, intervals widening with h."""
    name = "ses"

    def _fit(self, series: TimeSeries):
        res = fit_ets(series.values, error="add", trend=None, seasonal=None)
        return res, np.asarray(res.fittedvalues, dtype=float)

    def _forecast(self, fitted: FittedModel, horizon: int, levels: Tuple[int, ...]):
        return ets_forecast(fitted.handle, len(fitted.series), horizon, levels)


@dataclass
class HoltWintersConfig:
    seasonal: Literal["add", "mul"] = "add"
    trend: Optional[Literal["add", "mul"]] = "add"
    damped_trend: bool = False
    seasonal_periods: Optional[int] = None  # defaults to the series frequency
    random_state: int = 0                   # simulated intervals (multiplicative models)

    def __post_init__(self) -> None:
        if self.seasonal not in ("add", "mul"):
            raise ValueError(f"seasonal must be 'add' or 'mul', got {self.seasonal!r}")
        if self.trend not in (None, "add", "mul"):
            raise ValueError(f"trend must be None, 'add' or 'mul', got {self.trend!r}")


class HoltWinters(ForecastAdapter):
    """
    Holt-Winters exponential smoothing (level + trend + seasonal index).

    Backed by statsmodels ETSModel with additive errors. Multiplicative
    components need strictly positive data.
    """
    name = "holt_winters"
    seasonal = True

    def __init__(self, cfg: HoltWintersConfig | None = None):
        self.cfg = cfg or HoltWintersConfig()

    def _uses_mul(self) -> bool:
        return self.cfg.seasonal == "mul" or self.cfg.trend == "mul"

    def _fit(self, series: TimeSeries):
        y = series.values
        if self._uses_mul() and np.any(y <= 0.0):
            raise InvalidSeriesError("multiplicative Holt-Winters requires strictly positive data")
        res = fit_ets(
            y,
            error="add",
            trend=self.cfg.trend,
            damped_trend=self.cfg.damped_trend and self.cfg.trend is not None,
            seasonal=self.cfg.seasonal,
            seasonal_periods=self.cfg.seasonal_periods or series.frequency,
        )
        return res, np.asarray(res.fittedvalues, dtype=float)

    def _forecast(self, fitted: FittedModel, horizon: int, levels: Tuple[int, ...]):
        kw = {SEED_KEYWORD: self.cfg.random_state} if self._uses_mul() else {}
        return ets_forecast(fitted.handle, len(fitted.series), horizon, levels, **kw)
