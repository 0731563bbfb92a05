# src/forecast_select/data/diagnostics.py
from __future__ import annotations
from typing import Literal, Optional, Dict, Any

import numpy as np
import pandas as pd
from statsmodels.tsa.seasonal import STL, seasonal_decompose
from statsmodels.tsa.stattools import acf, adfuller

from ..models.base import require_cycles
from ..series import TimeSeries

DecomposeMethod = Literal["classical", "stl"]

def decompose(
    series: TimeSeries,
    method: DecomposeMethod = "classical",
    model: Literal["additive", "multiplicative"] = "additive",
    stl_seasonal: int = 7,
    robust: bool = False,
) -> pd.DataFrame:
    """
    Split a series into trend / seasonal / remainder.

    'classical' uses moving averages (trend undefined at the edges);
    'stl' uses LOESS and is additive only. Needs two full cycles.
    Returns a DataFrame with columns observed, trend, seasonal, resid.
    """
    require_cycles(series, 2, f"{method} decomposition")
    y = series.values
    if method == "classical":
        res = seasonal_decompose(y, model=model, period=series.frequency)
    elif method == "stl":
        if model != "additive":
            raise ValueError("STL decomposition is additive only.")
        res = STL(y, period=series.frequency, seasonal=stl_seasonal, robust=robust).fit()
    else:
        raise ValueError(f"Unknown method={method}")
    return pd.DataFrame(
        {
            "observed": y,
            "trend": np.asarray(res.trend, dtype=float),
            "seasonal": np.asarray(res.seasonal, dtype=float),
            "resid": np.asarray(res.resid, dtype=float),
        },
        index=pd.Index(series.labels(), name="period"),
    )

def autocorrelation(series: TimeSeries, nlags: Optional[int] = None) -> pd.Series:
    """Sample ACF for lags 0..nlags (defaults to two seasonal cycles, capped at n-1)."""
    n = len(series)
    if nlags is None:
        nlags = 2 * series.frequency
    nlags = max(0, min(int(nlags), n - 1))
    values = acf(series.values, nlags=nlags, fft=True)
    return pd.Series(values, index=pd.RangeIndex(nlags + 1, name="lag"), name="acf")

def adf_unit_root_test(
    y: TimeSeries | pd.Series | list[float],
    maxlag: Optional[int] = None,
    regression: Literal["c", "ct", "ctt", "n"] = "c",
    autolag: Literal["AIC", "BIC", "t-stat"] | None = "AIC",
    alpha: float = 0.05,
) -> Dict[str, Any]:
    """
    Augmented Dickey-Fuller test wrapper.
    Returns dict with test_stat, pvalue, nobs, usedlag, critical values, and 'has_unit_root' boolean.
    """
    arr = y.values if isinstance(y, TimeSeries) else pd.Series(y).astype(float).values
    result = adfuller(arr, maxlag=maxlag, regression=regression, autolag=autolag)
    test_stat, pvalue, usedlag, nobs, crit = result[:5]
    return {
        "test_stat": float(test_stat),
        "pvalue": float(pvalue),
        "usedlag": int(usedlag),
        "nobs": int(nobs),
        "critical_values": crit,
        "has_unit_root": bool(pvalue >= alpha),
        "alpha": alpha,
    }
