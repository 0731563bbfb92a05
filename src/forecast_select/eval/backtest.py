# src/forecast_select/eval/backtest.py
from __future__ import annotations
from typing import Sequence

import pandas as pd

from ..errors import InvalidHorizonError
from ..models.base import DEFAULT_LEVELS, ForecastAdapter, check_horizon
from ..series import TimeSeries
from .metrics import mae, rmse, mape

def holdout_backtest(
    model: ForecastAdapter,
    series: TimeSeries,
    horizon: int,
    levels: Sequence[int] = DEFAULT_LEVELS,
):
    """Fit on series[:-h], forecast h, score vs series[-h:]."""
    h = check_horizon(horizon)
    if h >= len(series):
        raise InvalidHorizonError(f"horizon must be < len(series) ({len(series)}) for a holdout backtest")
    train = series.window(0, len(series) - h)
    test = series.values[-h:]

    result = model.forecast(model.fit(train), h, levels=levels)

    return {
        "model": model.name,
        "horizon": h,
        "mae": mae(test, result.mean),
        "rmse": rmse(test, result.mean),
        "mape": mape(test, result.mean),
        "y_true": pd.Series(test, index=train.future_labels(h)),
        "y_pred": pd.Series(result.mean, index=train.future_labels(h)),
        "forecast": result,
    }
