from .metrics import mae, rmse, mape, score
from .backtest import holdout_backtest

__all__ = ["mae", "rmse", "mape", "score", "holdout_backtest"]
