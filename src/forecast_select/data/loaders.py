from __future__ import annotations
from typing import Optional, Sequence, Literal
import pandas as pd
import pathlib

from ..errors import InvalidSeriesError
from ..series import TimeSeries

ReadFmt = Literal["auto", "parquet", "csv"]

def _read_any(path: str | pathlib.Path, fmt: ReadFmt = "auto", **read_kwargs) -> pd.DataFrame:
    path = str(path)
    if fmt == "auto":
        if path.endswith(".parquet"):
            fmt = "parquet"
        elif path.endswith(".csv"):
            fmt = "csv"
        else:
            raise ValueError("Unknown file format; pass fmt='parquet' or fmt='csv'.")
    if fmt == "parquet":
        return pd.read_parquet(path, **read_kwargs)
    elif fmt == "csv":
        return pd.read_csv(path, **read_kwargs)
    raise ValueError(f"Unsupported fmt={fmt}")

def load_timeseries(
    path: str | pathlib.Path,
    time_col: Optional[str] = None,
    value_col: Optional[str] = None,
    fmt: ReadFmt = "auto",
    time_candidates: Sequence[str] = ("ds", "month", "date", "period", "time", "timestamp", "datetime"),
    value_candidates: Sequence[str] = ("y", "value", "spend", "ad_spend", "sales", "target"),
    dropna: bool = True,
    sort: bool = True,
) -> pd.DataFrame:
    """
    Load a univariate time series and standardize columns to:
      - ds: timestamps (naive, parsed from time_col)
      - y: float values

    Returns a DataFrame with columns ['ds','y'].
    """
    df = _read_any(path, fmt=fmt)

    # Pick columns if not specified
    if time_col is None:
        for c in time_candidates:
            if c in df.columns:
                time_col = c
                break
    if value_col is None:
        for c in value_candidates:
            if c in df.columns:
                value_col = c
                break
    if time_col is None or value_col is None:
        raise ValueError(f"Could not infer time/value columns from {list(df.columns)}")
    for c in (time_col, value_col):
        if c not in df.columns:
            raise ValueError(f"Column '{c}' not found in {list(df.columns)}")

    ds = pd.to_datetime(df[time_col], errors="coerce")
    y = pd.to_numeric(df[value_col], errors="coerce")

    out = pd.DataFrame({"ds": ds, "y": y})
    if dropna:
        out = out.dropna(subset=["ds", "y"])

    # Remove duplicates (keep last)
    out = out.drop_duplicates(subset=["ds"], keep="last")

    if sort:
        out = out.sort_values("ds").reset_index(drop=True)

    return out

def load_series(
    path: str | pathlib.Path,
    value_col: Optional[str] = None,
    time_col: Optional[str] = None,
    start: Optional[tuple[int, int]] = None,
    frequency: int = 12,
    fmt: ReadFmt = "auto",
) -> TimeSeries:
    """
    Load one numeric column as a TimeSeries.

    The start period is read off the first timestamp unless given explicitly.
    """
    df = load_timeseries(path, time_col=time_col, value_col=value_col, fmt=fmt)
    if df.empty:
        raise InvalidSeriesError(f"No usable observations in {path}")
    s = pd.Series(df["y"].to_numpy(), index=pd.DatetimeIndex(df["ds"]), name=value_col or "y")
    return TimeSeries.from_pandas(s, frequency=frequency, start=start)

def parse_start(text: str) -> tuple[int, int]:
    """'2015-03' / '2015.3' / '2015' -> (2015, 3) / (2015, 3) / (2015, 1)."""
    for sep in ("-", ".", "Q", "q"):
        if sep in text:
            year, sub = text.split(sep, 1)
            return int(year), int(sub)
    return int(text), 1
