# src/forecast_select/series.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from .errors import InvalidSeriesError


@dataclass(frozen=True, eq=False)
class TimeSeries:
    """
    Immutable univariate series with period metadata.

    Positions are tagged implicitly: offset k sits k sampling periods after
    `start`, which is a (year, sub_period) pair with sub_period in 1..frequency.

    Example:
        ts = TimeSeries([112.0, 118.0, 132.0], start=(2015, 1), frequency=12)
        ts.period_label(2)   # '2015-03'
    """
    values: np.ndarray
    start: tuple[int, int] = (1, 1)
    frequency: int = 12
    name: str = "y"

    def __post_init__(self) -> None:
        try:
            freq = int(self.frequency)
        except (TypeError, ValueError) as e:
            raise InvalidSeriesError(f"frequency must be an integer, got {self.frequency!r}") from e
        if freq <= 0:
            raise InvalidSeriesError(f"frequency must be > 0, got {freq}")

        try:
            arr = np.array(self.values, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidSeriesError("Series values must be numeric.") from e
        if arr.ndim != 1:
            raise InvalidSeriesError("Input series must be 1D.")
        if arr.size == 0:
            raise InvalidSeriesError("Input series is empty.")
        if not np.all(np.isfinite(arr)):
            raise InvalidSeriesError("Input series contains missing or infinite values.")
        arr.setflags(write=False)

        try:
            year, sub = (int(p) for p in self.start)
        except (TypeError, ValueError) as e:
            raise InvalidSeriesError(f"start must be a (year, sub_period) pair of integers, got {self.start!r}") from e
        if not 1 <= sub <= freq:
            raise InvalidSeriesError(f"start sub-period must be in 1..{freq}, got {sub}")

        object.__setattr__(self, "values", arr)
        object.__setattr__(self, "frequency", freq)
        object.__setattr__(self, "start", (year, sub))

    @classmethod
    def from_pandas(cls, s: pd.Series, frequency: int = 12, start: tuple[int, int] | None = None) -> "TimeSeries":
        """Build from a pandas Series; start is read off a Datetime/Period index when not given."""
        if start is None:
            start = _start_from_index(s.index, frequency)
        return cls(s.to_numpy(dtype=float), start=start, frequency=frequency, name=str(s.name or "y"))

    def __len__(self) -> int:
        return int(self.values.size)

    @property
    def full_cycles(self) -> int:
        return len(self) // self.frequency

    def value_at(self, offset: int) -> float:
        n = len(self)
        if not -n <= offset < n:
            raise IndexError(f"offset {offset} out of range for series of length {n}")
        return float(self.values[offset])

    def window(self, start: int = 0, stop: int | None = None) -> "TimeSeries":
        """Sub-range [start, stop) as a new series with its start period shifted."""
        lo, hi, _ = slice(start, stop).indices(len(self))
        if hi <= lo:
            raise InvalidSeriesError(f"window [{start}, {stop}) is empty")
        return TimeSeries(self.values[lo:hi], start=self.period_of(lo),
                          frequency=self.frequency, name=self.name)

    def period_of(self, offset: int) -> tuple[int, int]:
        pos = (self.start[1] - 1) + int(offset)
        return self.start[0] + pos // self.frequency, pos % self.frequency + 1

    def period_label(self, offset: int) -> str:
        year, sub = self.period_of(offset)
        if self.frequency == 12:
            return f"{year}-{sub:02d}"
        if self.frequency == 4:
            return f"{year}Q{sub}"
        if self.frequency == 1:
            return f"{year}"
        return f"{year}.{sub}"

    def labels(self) -> list[str]:
        return [self.period_label(i) for i in range(len(self))]

    def future_labels(self, horizon: int) -> list[str]:
        n = len(self)
        return [self.period_label(n + h) for h in range(int(horizon))]

    def to_pandas(self) -> pd.Series:
        return pd.Series(np.array(self.values), index=pd.Index(self.labels(), name="period"), name=self.name)


def _start_from_index(index: pd.Index, frequency: int) -> tuple[int, int]:
    if len(index) == 0:
        raise InvalidSeriesError("Input series is empty.")
    first = index[0]
    if isinstance(first, pd.Period):
        first = first.to_timestamp()
    if not isinstance(first, pd.Timestamp):
        return (1, 1)
    if frequency == 12:
        return first.year, first.month
    if frequency == 4:
        return first.year, first.quarter
    if frequency == 1:
        return first.year, 1
    return (1, 1)


def as_series(y: Sequence[float] | pd.Series | np.ndarray | TimeSeries, frequency: int = 12) -> TimeSeries:
    if isinstance(y, TimeSeries):
        return y
    if isinstance(y, pd.Series):
        return TimeSeries.from_pandas(y, frequency=frequency)
    return TimeSeries(y, frequency=frequency)
