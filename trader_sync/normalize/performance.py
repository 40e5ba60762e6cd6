"""
Performance-state payload -> PerformanceReport.

Ratios the backend omits are computed from the closed trades in the same payload.
"""

from __future__ import annotations
import logging
from typing import Any, Mapping

from trader_sync.analytics.metrics import compute_ratios
from trader_sync.core.errors import TraderInactiveError
from trader_sync.core.types import PerformanceMetrics, PerformanceReport
from trader_sync.normalize import fields as F
from trader_sync.normalize.status import closed_trade_count, is_active
from trader_sync.normalize.trades import normalize_trades

logger = logging.getLogger("trader_sync.normalize")


def reports_liveness(payload: Mapping) -> bool:
    return F.ACTIVE_FLAG in payload or F.STATUS_KEY in payload


def normalize_performance(payload: Any) -> PerformanceReport:
    """
    Raises TraderInactiveError when the payload carries a run-state and it is not
    active. Payloads without any run-state (older flat shape) are accepted as-is.
    """
    if not isinstance(payload, Mapping):
        return PerformanceReport(metrics=PerformanceMetrics())
    if reports_liveness(payload) and not is_active(payload):
        logger.info("Performance metrics unavailable: trading not active")
        raise TraderInactiveError()

    trades = tuple(normalize_trades(payload))
    closed = [t for t in trades if t.is_closed]
    t = F.PERFORMANCE_FIELDS

    final_balance = F.resolve_float(payload, t["final_balance"])
    pnls = [tr.pnl for tr in closed]
    initial = F.resolve_float(payload, t["initial_balance"], None)
    if initial is None and final_balance > 0:
        initial = final_balance - sum(pnls)
    fallback = compute_ratios(pnls, initial or 0.0)

    closed_count = closed_trade_count(payload)
    if closed_count is None:
        closed_count = len(closed)

    metrics = PerformanceMetrics(
        total_return=F.resolve_float(payload, t["total_return"], fallback.total_return),
        sharpe_ratio=F.resolve_float(payload, t["sharpe_ratio"], fallback.sharpe_ratio),
        sortino_ratio=F.resolve_float(payload, t["sortino_ratio"], fallback.sortino_ratio),
        calmar_ratio=F.resolve_float(payload, t["calmar_ratio"], fallback.calmar_ratio),
        max_drawdown=F.resolve_float(payload, t["max_drawdown"], fallback.max_drawdown),
        win_rate=F.resolve_float(payload, t["win_rate"], fallback.win_rate),
        num_trades=F.resolve_int(payload, t["num_trades"], len(trades)),
        closed_trades=closed_count,
        final_balance=final_balance,
    )
    return PerformanceReport(metrics=metrics, trades=trades)
