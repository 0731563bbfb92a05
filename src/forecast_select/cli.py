# src/forecast_select/cli.py
from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .data.diagnostics import adf_unit_root_test, autocorrelation
from .data.loaders import load_series, parse_start
from .errors import ForecastError
from .eval.backtest import holdout_backtest
from .registry import DEFAULT_MODELS, default_adapters, get_model
from .selection import select
from .series import TimeSeries

app = typer.Typer(add_completion=False, help="Rank classical forecasting models on one series.")
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )


def _load(path: str, value_col: Optional[str], time_col: Optional[str],
          start: Optional[str], frequency: int) -> TimeSeries:
    return load_series(
        path,
        value_col=value_col,
        time_col=time_col,
        start=parse_start(start) if start else None,
        frequency=frequency,
    )


@app.command()
def run(
    path: str,
    value_col: Optional[str] = None,
    time_col: Optional[str] = None,
    start: Optional[str] = typer.Option(None, help="First period, e.g. 2015-01; read from the data if omitted."),
    frequency: int = 12,
    horizon: int = 12,
    models: str = ",".join(DEFAULT_MODELS),
    n_jobs: int = 1,
    verbose: bool = False,
):
    """Fit every model, print the RMSE ranking and the winner's forecast."""
    _setup_logging(verbose)
    try:
        series = _load(path, value_col, time_col, start, frequency)
        names = [m.strip() for m in models.split(",") if m.strip()]
        result = select(series, default_adapters(series.frequency, names), horizon=horizon, n_jobs=n_jobs)
    except (ForecastError, KeyError, ValueError, OSError) as e:
        console.print(f"[red]error:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title=f"Model ranking ({series.name}, n={len(series)})")
    table.add_column("Rank", justify="right")
    table.add_column("Model", style="cyan")
    table.add_column("RMSE", justify="right", style="green")
    table.add_column("MAE", justify="right")
    table.add_column("MAPE %", justify="right")
    for i, e in enumerate(result.ranking, 1):
        table.add_row(str(i), e.name, f"{e.rmse:.3f}", f"{e.mae:.3f}", f"{e.mape:.2f}")
    console.print(table)

    if result.failures:
        failed = Table(title="Failed models")
        failed.add_column("Model", style="cyan")
        failed.add_column("Error", style="red")
        failed.add_column("Reason")
        for f in result.failures:
            failed.add_row(f.name, f.error, f.reason)
        console.print(failed)

    frame = result.forecast.to_frame()
    fc = Table(title=f"{result.best} forecast, h={horizon}")
    fc.add_column("Period", style="cyan")
    for col in frame.columns:
        fc.add_column(col, justify="right")
    for label, row in frame.iterrows():
        fc.add_row(str(label), *(f"{v:.2f}" for v in row))
    console.print(fc)


@app.command()
def diagnose(
    path: str,
    value_col: Optional[str] = None,
    time_col: Optional[str] = None,
    start: Optional[str] = None,
    frequency: int = 12,
    nlags: Optional[int] = None,
):
    """ADF unit-root test and autocorrelations."""
    _setup_logging(False)
    try:
        series = _load(path, value_col, time_col, start, frequency)
        adf = adf_unit_root_test(series)
        acf = autocorrelation(series, nlags)
    except (ForecastError, KeyError, ValueError, OSError) as e:
        console.print(f"[red]error:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title="Augmented Dickey-Fuller")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    for k in ("test_stat", "pvalue", "usedlag", "nobs", "has_unit_root"):
        table.add_row(k, str(adf[k]))
    console.print(table)

    acf_table = Table(title="Autocorrelation")
    acf_table.add_column("Lag", justify="right")
    acf_table.add_column("ACF", justify="right", style="green")
    for lag, value in acf.items():
        acf_table.add_row(str(lag), f"{value:.3f}")
    console.print(acf_table)


@app.command()
def backtest(
    path: str,
    model: str = "holt_winters",
    value_col: Optional[str] = None,
    time_col: Optional[str] = None,
    start: Optional[str] = None,
    frequency: int = 12,
    horizon: int = 12,
):
    """Hold out the last `horizon` observations and score one model on them."""
    _setup_logging(False)
    try:
        series = _load(path, value_col, time_col, start, frequency)
        out = holdout_backtest(get_model(model), series, horizon)
    except (ForecastError, KeyError, ValueError, OSError) as e:
        console.print(f"[red]error:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title=f"Holdout backtest: {model}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    for k in ("horizon", "mae", "rmse", "mape"):
        table.add_row(k, f"{out[k]:.3f}" if isinstance(out[k], float) else str(out[k]))
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
