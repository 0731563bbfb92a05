# src/forecast_select/errors.py
from __future__ import annotations


class ForecastError(Exception):
    """Base class for every error raised by forecast_select."""


class InvalidSeriesError(ForecastError, ValueError):
    """Malformed or empty input series."""


class InsufficientDataError(ForecastError):
    """Not enough history for the requested (seasonal) method."""


class InvalidHorizonError(ForecastError, ValueError):
    """Non-positive forecast horizon."""


class EmptyOverlapError(ForecastError):
    """No positions where both actual and fitted values are defined."""


class NoViableModelError(ForecastError):
    """Every candidate model failed during selection."""

    def __init__(self, failures):
        self.failures = list(failures)
        names = ", ".join(f"{f.name} ({f.reason})" for f in self.failures) or "none given"
        super().__init__(f"All candidate models failed: {names}")
