from .loaders import load_series, load_timeseries, parse_start
from .diagnostics import adf_unit_root_test, autocorrelation, decompose

__all__ = ["load_series", "load_timeseries", "parse_start", "adf_unit_root_test", "autocorrelation", "decompose"]
