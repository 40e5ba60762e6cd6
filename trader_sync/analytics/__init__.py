"""Analytics: trade-series ratios (Sharpe, Sortino, Calmar, MDD, win rate)."""

from trader_sync.analytics.metrics import (
    TradeSeriesRatios,
    compute_ratios,
    trade_returns,
    equity_curve,
    sharpe_ratio,
    sortino_ratio,
    max_drawdown,
    calmar_ratio,
    win_rate,
)

__all__ = [
    "TradeSeriesRatios",
    "compute_ratios",
    "trade_returns",
    "equity_curve",
    "sharpe_ratio",
    "sortino_ratio",
    "max_drawdown",
    "calmar_ratio",
    "win_rate",
]
