# src/forecast_select/eval/metrics.py
from __future__ import annotations
import numpy as np
import pandas as pd

from ..errors import EmptyOverlapError
from ..series import TimeSeries

def _to_arr(x): return pd.Series(np.asarray(x, dtype="float64")).to_numpy()

def _overlap(y_true, y_pred) -> tuple[np.ndarray, np.ndarray]:
    a = _to_arr(y_true); b = _to_arr(y_pred)
    if a.shape != b.shape:
        raise ValueError(f"Length mismatch: {a.size} actual vs {b.size} predicted values.")
    mask = np.isfinite(a) & np.isfinite(b)
    return a[mask], b[mask]

def mae(y_true, y_pred) -> float:
    a, b = _overlap(y_true, y_pred)
    return float(np.mean(np.abs(a - b))) if a.size else np.nan

def rmse(y_true, y_pred) -> float:
    a, b = _overlap(y_true, y_pred)
    return float(np.sqrt(np.mean((a - b) ** 2))) if a.size else np.nan

def mape(y_true, y_pred, eps: float = 1e-12) -> float:
    a, b = _overlap(y_true, y_pred)
    if not a.size:
        return np.nan
    denom = np.maximum(np.abs(a), eps)
    return float(np.mean(np.abs((a - b) / denom))) * 100.0

def overlap_count(y_true, y_pred) -> int:
    return int(_overlap(y_true, y_pred)[0].size)

def score(series: TimeSeries, fitted) -> float:
    """
    In-sample RMSE of fitted values against the series.

    Positions where the fitted value is undefined (e.g. the edges of a
    centred moving average) are skipped. Raises EmptyOverlapError when
    nothing is left to score.
    """
    if overlap_count(series.values, fitted) == 0:
        raise EmptyOverlapError(f"No overlapping defined positions between series '{series.name}' and fitted values.")
    return rmse(series.values, fitted)
