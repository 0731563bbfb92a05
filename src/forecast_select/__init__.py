from .errors import (
    EmptyOverlapError,
    ForecastError,
    InsufficientDataError,
    InvalidHorizonError,
    InvalidSeriesError,
    NoViableModelError,
)
from .series import TimeSeries
from .models import FittedModel, ForecastAdapter, ForecastResult
from .eval.metrics import score
from .registry import DEFAULT_MODELS, default_adapters, get_model, register
from .selection import ModelEntry, ModelFailure, SelectionResult, select

__version__ = "0.1.0"

__all__ = [
    "TimeSeries", "FittedModel", "ForecastAdapter", "ForecastResult",
    "score", "select", "ModelEntry", "ModelFailure", "SelectionResult",
    "DEFAULT_MODELS", "default_adapters", "get_model", "register",
    "ForecastError", "InvalidSeriesError", "InsufficientDataError",
    "InvalidHorizonError", "EmptyOverlapError", "NoViableModelError",
]
