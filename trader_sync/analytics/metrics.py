"""
Trade-series ratios used when the backend leaves them out.

Everything here works on closed trades, not on calendar periods: a "return" is one
trade's PnL divided by the account balance just before that trade. Ratios are
per-trade unless trades_per_year is given, in which case they are scaled by
sqrt(trades_per_year).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

_EPS = 1e-12


@dataclass(frozen=True)
class TradeSeriesRatios:
    total_return: float
    sharpe_ratio: float
    sortino_ratio: float
    calmar_ratio: float
    max_drawdown: float  # fraction, negative (e.g. -0.15 = 15% below peak)
    win_rate: float


def _balances_before(pnls: np.ndarray, initial_balance: float) -> np.ndarray:
    return initial_balance + np.concatenate(([0.0], np.cumsum(pnls)[:-1]))


def _scale(trades_per_year: Optional[float]) -> float:
    return float(np.sqrt(trades_per_year)) if trades_per_year else 1.0


def trade_returns(pnls: Sequence[float], initial_balance: float) -> list[float]:
    """Each trade's PnL over the balance it was taken from. Empty without a balance."""
    pnl = np.asarray(pnls, dtype=float)
    if initial_balance <= 0 or pnl.size == 0:
        return []
    before = _balances_before(pnl, initial_balance)
    return np.divide(pnl, before, out=np.zeros_like(pnl), where=before > 0).tolist()


def equity_curve(pnls: Sequence[float], initial_balance: float) -> list[float]:
    """Balance after each trade, starting with the initial balance."""
    return np.cumsum(np.concatenate(([initial_balance], np.asarray(pnls, dtype=float)))).tolist()


def sharpe_ratio(returns: Sequence[float], trades_per_year: Optional[float] = None) -> float:
    """Mean trade return over its sample standard deviation."""
    arr = np.asarray(returns, dtype=float)
    if arr.size < 2:
        return 0.0
    sd = arr.std(ddof=1)
    if sd <= _EPS:
        return 0.0
    return float(arr.mean() / sd * _scale(trades_per_year))


def sortino_ratio(returns: Sequence[float], trades_per_year: Optional[float] = None) -> float:
    """
    Mean trade return over downside deviation, sqrt(mean(min(r, 0)^2)) taken over
    all trades. 0 when no trade lost money.
    """
    arr = np.asarray(returns, dtype=float)
    if arr.size == 0:
        return 0.0
    downside = np.sqrt(np.mean(np.minimum(arr, 0.0) ** 2))
    if downside <= _EPS:
        return 0.0
    return float(arr.mean() / downside * _scale(trades_per_year))


def max_drawdown(equity: Sequence[float]) -> float:
    """Deepest fall below the running peak, as a fraction (<= 0)."""
    arr = np.asarray(equity, dtype=float)
    if arr.size == 0:
        return 0.0
    peaks = np.maximum.accumulate(arr)
    falls = np.divide(arr, peaks, out=np.ones_like(arr), where=peaks > 0) - 1.0
    return float(min(falls.min(), 0.0))


def calmar_ratio(total_return: float, max_dd: float) -> float:
    """Total return over absolute max drawdown. 0 when there was no drawdown."""
    if abs(max_dd) <= _EPS:
        return 0.0
    return total_return / abs(max_dd)


def win_rate(pnls: Sequence[float]) -> float:
    """Share of closed trades that made money."""
    if len(pnls) == 0:
        return 0.0
    return float(np.mean(np.asarray(pnls, dtype=float) > 0))


def compute_ratios(
    pnls: Sequence[float],
    initial_balance: float,
    trades_per_year: Optional[float] = None,
) -> TradeSeriesRatios:
    """All ratios for a closed-trade PnL series, in trade order."""
    if len(pnls) == 0 or initial_balance <= 0:
        return TradeSeriesRatios(0.0, 0.0, 0.0, 0.0, 0.0, win_rate(pnls))
    returns = trade_returns(pnls, initial_balance)
    total = float(np.sum(pnls)) / initial_balance
    mdd = max_drawdown(equity_curve(pnls, initial_balance))
    return TradeSeriesRatios(
        total_return=total,
        sharpe_ratio=sharpe_ratio(returns, trades_per_year),
        sortino_ratio=sortino_ratio(returns, trades_per_year),
        calmar_ratio=calmar_ratio(total, mdd),
        max_drawdown=mdd,
        win_rate=win_rate(pnls),
    )
