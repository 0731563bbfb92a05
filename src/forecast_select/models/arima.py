from __future__ import annotations
import warnings
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

import numpy as np
import pmdarima as pm
from pmdarima.pipeline import Pipeline
from pmdarima.preprocessing import BoxCoxEndogTransformer
from statsmodels.tsa.statespace.sarimax import SARIMAX

from ..series import TimeSeries
from .base import Bounds, FittedModel, ForecastAdapter, alpha_for, frame_bounds


def _mask_burn_in(fitted: np.ndarray, d: int, D: int, m: int) -> np.ndarray:
    """Blank the positions lost to differencing; they carry diffuse-start artefacts."""
    out = np.asarray(fitted, dtype=float).copy()
    k = min(out.size, int(d) + int(D) * int(m))
    out[:k] = np.nan
    return out


# =========================
# Manual ARIMA / SARIMA
# =========================

@dataclass
class ARIMAConfig:
    # Non-seasonal orders
    p: int = 1
    d: int = 1
    q: int = 1
    # Seasonality
    seasonal: bool = False
    P: int = 0
    D: int = 0
    Q: int = 0
    m: int = 0  # seasonal period; 0 means "use the series frequency"
    # Other options
    trend: Optional[str] = None        # 'n','c','t','ct'
    enforce_stationarity: bool = True
    enforce_invertibility: bool = True


class ARIMA(ForecastAdapter):
    """
    Fixed-order ARIMA/SARIMA adapter over statsmodels.SARIMAX.

    Example:
        cfg = ARIMAConfig(p=1, d=1, q=1, seasonal=True, P=0, D=1, Q=1)
        adapter = ARIMA(cfg)
        result = adapter.forecast(adapter.fit(series), 12)
    """
    name = "arima"

    def __init__(self, cfg: ARIMAConfig | None = None):
        self.cfg = cfg or ARIMAConfig()
        self.seasonal = bool(self.cfg.seasonal)

    def _period(self, series: TimeSeries) -> int:
        return self.cfg.m or series.frequency

    def _fit(self, series: TimeSeries):
        order = (self.cfg.p, self.cfg.d, self.cfg.q)
        m = self._period(series)
        if self.cfg.seasonal and m > 1:
            seasonal_order = (self.cfg.P, self.cfg.D, self.cfg.Q, m)
        else:
            seasonal_order = (0, 0, 0, 0)

        model = SARIMAX(
            series.values,
            order=order,
            seasonal_order=seasonal_order,
            trend=self.cfg.trend,
            enforce_stationarity=self.cfg.enforce_stationarity,
            enforce_invertibility=self.cfg.enforce_invertibility,
        )
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            res = model.fit(disp=0)
        fitted = _mask_burn_in(res.fittedvalues, self.cfg.d, seasonal_order[1], seasonal_order[3])
        return res, fitted

    def _forecast(self, fitted: FittedModel, horizon: int, levels: Tuple[int, ...]) -> Tuple[np.ndarray, Bounds, Bounds]:
        pred = fitted.handle.get_forecast(steps=horizon)
        mean = np.asarray(pred.predicted_mean, dtype=float)
        frames = {lv: pred.summary_frame(alpha=alpha_for(lv)) for lv in levels}
        lower, upper = frame_bounds(frames, "mean_ci_lower", "mean_ci_upper")
        return mean, lower, upper


# =========================
# AutoARIMA using pmdarima
# =========================

@dataclass
class AutoARIMAConfig:
    # Seasonality
    seasonal: bool = True
    m: int = 0                     # 0 means "use the series frequency"
    # Search bounds (cap total order to control complexity)
    start_p: int = 0
    start_q: int = 0
    max_p: int = 3
    max_q: int = 3
    start_P: int = 0
    start_Q: int = 0
    max_P: int = 1
    max_Q: int = 1
    max_order: Optional[int] = 5   # p+q+P+Q <= 5 (None disables)
    # Differencing (let auto if None)
    d: Optional[int] = None
    D: Optional[int] = None
    test: str = "kpss"             # unit-root test: 'adf'|'kpss'|'pp'
    seasonal_test: str = "ocsb"    # 'ocsb'|'ch'
    # Transform / intercept
    use_boxcox: Union[bool, str] = False  # 'auto' -> True if all(y>0)
    with_intercept: Union[bool, str] = "auto"
    # Model selection
    information_criterion: str = "aic"  # 'aic'|'bic'|'hqic'|'oob'
    stepwise: bool = True
    n_fits: int = 10               # only used when stepwise=False
    # UX / stability
    trace: bool = False
    suppress_warnings: bool = True
    error_action: str = "ignore"   # 'warn'|'raise'|'ignore'


class AutoARIMA(ForecastAdapter):
    """
    Order search with pmdarima.auto_arima:
    - seasonal search with caps
    - optional Box-Cox (pmdarima BoxCoxEndogTransformer) if data strictly positive
    - IC selection (AIC by default)
    """
    name = "auto_arima"

    def __init__(self, cfg: AutoARIMAConfig | None = None):
        self.cfg = cfg or AutoARIMAConfig()
        self.seasonal = bool(self.cfg.seasonal)

    def _decide_boxcox(self, y: np.ndarray) -> bool:
        if isinstance(self.cfg.use_boxcox, bool):
            return self.cfg.use_boxcox
        if str(self.cfg.use_boxcox).lower() == "auto":
            return bool(np.all(y > 0.0))
        return False

    def _search_kwargs(self, m: int) -> dict[str, Any]:
        return dict(
            seasonal=self.cfg.seasonal,
            m=m,
            start_p=self.cfg.start_p,
            start_q=self.cfg.start_q,
            max_p=self.cfg.max_p,
            max_q=self.cfg.max_q,
            start_P=self.cfg.start_P,
            start_Q=self.cfg.start_Q,
            max_P=self.cfg.max_P,
            max_Q=self.cfg.max_Q,
            max_order=self.cfg.max_order,
            d=self.cfg.d,
            D=self.cfg.D,
            test=self.cfg.test,
            seasonal_test=self.cfg.seasonal_test,
            information_criterion=self.cfg.information_criterion,
            stepwise=self.cfg.stepwise,
            n_fits=self.cfg.n_fits,
            trace=self.cfg.trace,
            suppress_warnings=self.cfg.suppress_warnings,
            error_action=self.cfg.error_action,
            with_intercept=self.cfg.with_intercept,
        )

    def _fit(self, series: TimeSeries):
        y = series.values
        m = (self.cfg.m or series.frequency) if self.cfg.seasonal else 1
        kwargs = self._search_kwargs(m)

        if self._decide_boxcox(y):
            model = Pipeline([
                ("boxcox", BoxCoxEndogTransformer()),
                ("arima", pm.AutoARIMA(**kwargs)),
            ])
            model.fit(y)
            arima = model.steps[-1][1].model_
        else:
            model = pm.auto_arima(y, **kwargs)
            arima = model

        d = arima.order[1]
        _, D, _, sm_ = arima.seasonal_order
        fitted = _mask_burn_in(model.predict_in_sample(), d, D, sm_)
        return model, fitted

    def _forecast(self, fitted: FittedModel, horizon: int, levels: Tuple[int, ...]) -> Tuple[np.ndarray, Bounds, Bounds]:
        model = fitted.handle
        mean = np.asarray(model.predict(n_periods=horizon), dtype=float)
        lower: Bounds = {}
        upper: Bounds = {}
        for level in levels:
            _, ci = model.predict(n_periods=horizon, return_conf_int=True, alpha=alpha_for(level))
            ci = np.asarray(ci, dtype=float)
            lower[level], upper[level] = ci[:, 0], ci[:, 1]
        return mean, lower, upper
