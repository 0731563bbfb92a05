# src/forecast_select/selection.py
"""
Fit every candidate model on one series, rank by in-sample RMSE and keep the
forecast of the winner.

A model that fails (too little history, a numerical error in the underlying
library, nothing to score) is recorded as a failure and dropped from the
ranking; it never aborts the run. Malformed requests (bad horizon or confidence level) fail
before any model is touched.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd
from joblib import Parallel, delayed

from .errors import NoViableModelError
from .eval.metrics import mae, mape, score
from .models.base import DEFAULT_LEVELS, ForecastAdapter, ForecastResult, alpha_for, check_horizon
from .registry import default_adapters
from .series import TimeSeries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelEntry:
    name: str
    rmse: float
    mae: float = float("nan")
    mape: float = float("nan")


@dataclass(frozen=True)
class ModelFailure:
    name: str
    error: str
    reason: str


@dataclass(frozen=True)
class _Evaluated:
    entry: ModelEntry
    result: ForecastResult


Outcome = Union[_Evaluated, ModelFailure]


@dataclass
class SelectionResult:
    ranking: List[ModelEntry]
    failures: List[ModelFailure] = field(default_factory=list)
    results: Dict[str, ForecastResult] = field(default_factory=dict)

    @property
    def best(self) -> str:
        return self.ranking[0].name

    @property
    def forecast(self) -> ForecastResult:
        return self.results[self.best]

    def ranking_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(e.name, e.rmse, e.mae, e.mape) for e in self.ranking],
            columns=["model", "rmse", "mae", "mape"],
        )


def evaluate(adapter: ForecastAdapter, series: TimeSeries, horizon: int,
             levels: Sequence[int] = DEFAULT_LEVELS) -> Outcome:
    """fit -> score -> forecast for one adapter, folded into a success or failure value."""
    try:
        fitted = adapter.fit(series)
        err = score(series, fitted.fitted)
        result = adapter.forecast(fitted, horizon, levels=levels)
    except Exception as e:  # any library failure becomes a per-model failure
        return ModelFailure(adapter.name, type(e).__name__, str(e))
    entry = ModelEntry(
        name=adapter.name,
        rmse=err,
        mae=mae(series.values, fitted.fitted),
        mape=mape(series.values, fitted.fitted),
    )
    return _Evaluated(entry, result)


def select(
    series: TimeSeries,
    adapters: Optional[Sequence[ForecastAdapter]] = None,
    horizon: int = 12,
    levels: Sequence[int] = DEFAULT_LEVELS,
    n_jobs: int = 1,
) -> SelectionResult:
    """
    Rank `adapters` on `series` by RMSE (ascending, ties kept in declaration
    order) and return the ranking plus every successful forecast.

    n_jobs != 1 evaluates adapters with joblib; outcomes are gathered in
    declaration order once all of them finish.
    """
    h = check_horizon(horizon)
    levels = tuple(int(lv) for lv in levels)
    for level in levels:
        alpha_for(level)
    if adapters is None:
        adapters = default_adapters(series.frequency)
    adapters = list(adapters)
    names = [a.name for a in adapters]
    if len(set(names)) != len(names):
        raise ValueError(f"Adapter names must be unique, got {names}")

    logger.debug("Evaluating %d models on '%s' (n=%d, h=%d)", len(adapters), series.name, len(series), h)
    if n_jobs == 1:
        outcomes = [evaluate(a, series, h, levels) for a in adapters]
    else:
        outcomes = Parallel(n_jobs=n_jobs)(delayed(evaluate)(a, series, h, levels) for a in adapters)

    evaluated: List[_Evaluated] = []
    failures: List[ModelFailure] = []
    for outcome in outcomes:
        if isinstance(outcome, ModelFailure):
            logger.warning("Model %s failed: %s: %s", outcome.name, outcome.error, outcome.reason)
            failures.append(outcome)
        else:
            logger.debug("Model %s: rmse=%.4f", outcome.entry.name, outcome.entry.rmse)
            evaluated.append(outcome)

    if not evaluated:
        raise NoViableModelError(failures)

    evaluated.sort(key=lambda ev: ev.entry.rmse)
    result = SelectionResult(
        ranking=[ev.entry for ev in evaluated],
        failures=failures,
        results={ev.entry.name: ev.result for ev in evaluated},
    )
    logger.info("Best model: %s (rmse=%.4f); %d ranked, %d failed",
                result.best, result.ranking[0].rmse, len(result.ranking), len(failures))
    return result
