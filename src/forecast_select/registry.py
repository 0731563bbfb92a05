from __future__ import annotations

from typing import Callable, Dict, List

from .models.base import ForecastAdapter
from .models.baselines import MovingAverage, MovingAverageConfig, Naive
from .models.exp_smoothing import HoltWinters, HoltWintersConfig, SimpleExpSmoothing
from .models.decomposition import ClassicalTrend, ClassicalTrendConfig, STLConfig, STLForecast
from .models.arima import ARIMA, ARIMAConfig, AutoARIMA, AutoARIMAConfig

# The central registry mapping string -> factory function
REGISTRY: Dict[str, Callable[..., ForecastAdapter]] = {}

# Candidate set evaluated by the selector when no adapters are given
DEFAULT_MODELS = ("naive", "moving_average", "ses", "holt_winters", "stl", "classical_trend")

def register(name: str, factory: Callable[..., ForecastAdapter]) -> None:
    """Register a model factory under a string name."""
    if not isinstance(name, str) or not name:
        raise ValueError("Model name must be a non-empty string.")
    REGISTRY[name] = factory

def get_model(name: str, **kwargs) -> ForecastAdapter:
    """Instantiate a model by name using kwargs for its config/params."""
    try:
        factory = REGISTRY[name]
    except KeyError as e:
        raise KeyError(f"Unknown model '{name}'. "
                       f"Available: {', '.join(sorted(REGISTRY))}") from e
    return factory(**kwargs)

def default_adapters(frequency: int = 12, names=DEFAULT_MODELS) -> List[ForecastAdapter]:
    """Build the candidate set; the moving-average window follows the series frequency."""
    adapters = []
    for name in names:
        if name == "moving_average":
            adapters.append(get_model(name, order=max(int(frequency), 2)))
        else:
            adapters.append(get_model(name))
    return adapters

# ---- Default registrations --------------------------------------------------

register("naive", lambda **_: Naive())

# Centred MA of order W (2xW for even W)
register(
    "moving_average",
    lambda order=12, **_: MovingAverage(MovingAverageConfig(order=order))
)

register("ses", lambda **_: SimpleExpSmoothing())

# Holt-Winters, additive or multiplicative seasonality
register(
    "holt_winters",
    lambda seasonal="add", trend="add", damped_trend=False, seasonal_periods=None, **_:
        HoltWinters(HoltWintersConfig(
            seasonal=seasonal, trend=trend,
            damped_trend=damped_trend, seasonal_periods=seasonal_periods,
        ))
)

register(
    "stl",
    lambda seasonal=7, robust=False, **_: STLForecast(STLConfig(seasonal=seasonal, robust=robust))
)

register(
    "classical_trend",
    lambda model="additive", **_: ClassicalTrend(ClassicalTrendConfig(model=model))
)

# ARIMA(p,d,q) with optional seasonal(P,D,Q,m) and trend
register(
    "arima",
    lambda p=1, d=1, q=1, seasonal=False, P=0, D=0, Q=0, m=0, trend=None, **_:
        ARIMA(ARIMAConfig(
            p=p, d=d, q=q,
            seasonal=seasonal, P=P, D=D, Q=Q, m=m,
            trend=trend
        ))
)

# AutoARIMA with seasonal + m and any extra AutoARIMAConfig kwargs
register(
    "auto_arima",
    lambda seasonal=True, m=0, **kw:
        AutoARIMA(AutoARIMAConfig(seasonal=seasonal, m=m, **kw))
)
