# src/forecast_select/models/base.py
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.stats import norm

from ..errors import InsufficientDataError, InvalidHorizonError
from ..series import TimeSeries

DEFAULT_LEVELS: Tuple[int, ...] = (80, 95)

Bounds = Dict[int, np.ndarray]


@dataclass(frozen=True, eq=False)
class FittedModel:
    """Opaque handle returned by ForecastAdapter.fit()."""
    model_name: str
    series: TimeSeries
    fitted: np.ndarray
    handle: Any = None


@dataclass(frozen=True, eq=False)
class ForecastResult:
    """
    Output of one adapter over one series.

    fitted is aligned one-to-one with the series (NaN where the method leaves a
    position undefined); mean/lower/upper cover the H periods right after the
    last observation.
    """
    model_name: str
    series: TimeSeries
    fitted: np.ndarray
    mean: np.ndarray
    lower: Bounds = field(default_factory=dict)
    upper: Bounds = field(default_factory=dict)

    @property
    def horizon(self) -> int:
        return int(self.mean.size)

    @property
    def levels(self) -> list[int]:
        return sorted(self.lower)

    @property
    def residuals(self) -> np.ndarray:
        return self.series.values - self.fitted

    def to_frame(self) -> pd.DataFrame:
        cols: dict[str, np.ndarray] = {"mean": self.mean}
        for level in self.levels:
            cols[f"lower_{level}"] = self.lower[level]
            cols[f"upper_{level}"] = self.upper[level]
        return pd.DataFrame(cols, index=pd.Index(self.series.future_labels(self.horizon), name="period"))

    def fitted_frame(self) -> pd.DataFrame:
        """In-sample actual / fitted / residual table for plotting or reporting."""
        return pd.DataFrame(
            {"actual": self.series.values, "fitted": self.fitted, "residual": self.residuals},
            index=pd.Index(self.series.labels(), name="period"),
        )


class ForecastAdapter(ABC):
    """
    Uniform fit/forecast interface over one external forecasting procedure.

    Subclasses implement _fit() and _forecast(); validation and packaging of
    results live here.
    """
    name: str = "model"
    seasonal: bool = False

    def fit(self, series: TimeSeries) -> FittedModel:
        if self.seasonal:
            require_cycles(series, 2, self.name)
        handle, fitted = self._fit(series)
        fitted = np.asarray(fitted, dtype=float)
        if fitted.shape != (len(series),):
            raise RuntimeError(f"{self.name}: fitted values have shape {fitted.shape}, expected ({len(series)},)")
        return FittedModel(self.name, series, fitted, handle)

    def forecast(self, fitted: FittedModel, horizon: int, levels: Sequence[int] = DEFAULT_LEVELS) -> ForecastResult:
        h = check_horizon(horizon)
        if fitted.model_name != self.name:
            raise ValueError(f"{self.name} cannot forecast from a model fitted by {fitted.model_name}")
        mean, lower, upper = self._forecast(fitted, h, tuple(int(lv) for lv in levels))
        return ForecastResult(
            model_name=self.name,
            series=fitted.series,
            fitted=fitted.fitted,
            mean=np.asarray(mean, dtype=float),
            lower={lv: np.asarray(v, dtype=float) for lv, v in lower.items()},
            upper={lv: np.asarray(v, dtype=float) for lv, v in upper.items()},
        )

    @abstractmethod
    def _fit(self, series: TimeSeries) -> Tuple[Any, np.ndarray]: ...

    @abstractmethod
    def _forecast(self, fitted: FittedModel, horizon: int, levels: Tuple[int, ...]) -> Tuple[np.ndarray, Bounds, Bounds]: ...

    def __repr__(self) -> str:
        cfg = getattr(self, "cfg", None)
        return f"{type(self).__name__}({cfg!r})" if cfg is not None else f"{type(self).__name__}()"


def check_horizon(horizon: Any) -> int:
    if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer)):
        raise InvalidHorizonError(f"horizon must be an integer, got {horizon!r}")
    if horizon <= 0:
        raise InvalidHorizonError(f"horizon must be > 0, got {horizon}")
    return int(horizon)


def require_cycles(series: TimeSeries, cycles: int, model_name: str) -> None:
    needed = cycles * series.frequency
    if series.frequency < 2 or len(series) < needed:
        raise InsufficientDataError(
            f"{model_name} needs at least {cycles} full seasonal cycles "
            f"({needed} observations at frequency {series.frequency}), got {len(series)}"
        )


def alpha_for(level: int) -> float:
    if not 0 < level < 100:
        raise ValueError(f"confidence level must be in (0, 100), got {level}")
    return 1.0 - level / 100.0


def z_value(level: int) -> float:
    return float(norm.ppf(1.0 - alpha_for(level) / 2.0))


def random_walk_bounds(mean: np.ndarray, sigma: float, levels: Sequence[int]) -> Tuple[Bounds, Bounds]:
    """mean ± z·σ·√h for h = 1..H."""
    steps = np.sqrt(np.arange(1, mean.size + 1, dtype=float))
    lower: Bounds = {}
    upper: Bounds = {}
    for level in levels:
        width = z_value(level) * sigma * steps
        lower[level] = mean - width
        upper[level] = mean + width
    return lower, upper


def frame_bounds(frames: Dict[int, pd.DataFrame], lower_col: str, upper_col: str) -> Tuple[Bounds, Bounds]:
    """Pull interval columns out of statsmodels summary_frame() outputs, one frame per level."""
    lower = {lv: np.asarray(f[lower_col], dtype=float) for lv, f in frames.items()}
    upper = {lv: np.asarray(f[upper_col], dtype=float) for lv, f in frames.items()}
    return lower, upper


def residual_sigma(resid: np.ndarray) -> float:
    r = np.asarray(resid, dtype=float)
    r = r[np.isfinite(r)]
    if r.size < 2:
        return 0.0
    return float(np.std(r, ddof=1))
