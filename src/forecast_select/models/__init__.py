from .base import DEFAULT_LEVELS, FittedModel, ForecastAdapter, ForecastResult
from .baselines import MovingAverage, MovingAverageConfig, Naive
from .exp_smoothing import HoltWinters, HoltWintersConfig, SimpleExpSmoothing
from .decomposition import ClassicalTrend, ClassicalTrendConfig, STLConfig, STLForecast
from .arima import ARIMA, ARIMAConfig, AutoARIMA, AutoARIMAConfig

__all__ = [
    "DEFAULT_LEVELS", "FittedModel", "ForecastAdapter", "ForecastResult",
    "Naive", "MovingAverage", "MovingAverageConfig",
    "SimpleExpSmoothing", "HoltWinters", "HoltWintersConfig",
    "STLForecast", "STLConfig", "ClassicalTrend", "ClassicalTrendConfig",
    "ARIMA", "ARIMAConfig", "AutoARIMA", "AutoARIMAConfig",
]
