"""
Field-resolution tables for the backend's drifting response schema.

Each canonical field maps to an ordered tuple of key paths. Paths are dotted to
reach into nested objects ("position_details.total_portfolio_value"). Resolution
takes the first path whose value is present and not null; numeric resolution also
skips values that do not parse as numbers. When nothing matches, the default
(zero or empty) is used. Shapes seen so far:

  v1  flat summary keys (portfolio_value, balance, trade_count, ...),
      position_details as {symbol: {shares, average_price, ...}},
      activity_summary object
  v2  renamed keys (total_portfolio_value, available_cash, position_shares,
      entry_price_per_share)
  v3  status/is_trading, position_details.positions_by_symbol list with
      direction, current_balance, performance_metrics object, win/loss counts,
      recent_trades as BUY/SELL/UPDATE events
"""

from __future__ import annotations
import math
from typing import Any, Iterable, Mapping, Optional, Tuple

_MISSING = object()

Paths = Tuple[str, ...]

# Trading state
ACTIVE_FLAG = "is_trading"
STATUS_KEY = "status"
ACTIVE_STATUS_TOKENS = frozenset({"running", "active"})

# Position records
POSITION_LIST_PATHS: Paths = ("position_details.positions_by_symbol", "positions")
POSITION_MAP_PATH = "position_details"
# Keys inside position_details that hold containers, never a symbol
POSITION_CONTAINER_KEYS = frozenset({"positions_by_symbol", "positions"})
POSITION_FIELDS: dict[str, Paths] = {
    "symbol": ("symbol",),
    "shares": ("shares", "position_shares", "quantity", "position_size"),
    "entry_price": ("average_price", "entry_price_per_share", "entry_price"),
    "current_price": ("current_market_price", "current_price"),
    "unrealized_pnl": ("unrealized_pnl",),
    "direction": ("direction", "side"),
}
# A mapping counts as a position record when it carries any of these
POSITION_RECORD_PATHS: Paths = (
    POSITION_FIELDS["shares"] + POSITION_FIELDS["entry_price"] + POSITION_FIELDS["current_price"]
)
SHORT_TOKENS = frozenset({"short", "sell"})

PORTFOLIO_FIELDS: dict[str, Paths] = {
    "portfolio_value": (
        "position_details.total_portfolio_value",
        "total_portfolio_value",
        "portfolio_value",
        "current_balance",
    ),
    "unrealized_pnl": ("position_details.total_unrealized_pnl", "unrealized_pnl"),
    "realized_pnl": ("realized_pnl", "total_pnl"),
    "total_pnl": ("total_pnl",),
    "drawdown": ("performance_metrics.max_drawdown", "drawdown", "max_drawdown"),
    "balance": ("current_balance", "balance", "available_cash"),
    "daily_pnl": ("daily_pnl", "position_details.total_unrealized_pnl"),
    "win_rate": ("win_rate", "performance_metrics.win_rate"),
    "trade_count": ("total_trades", "trade_count"),
}

ACTIVITY_FIELDS: dict[str, Paths] = {
    "total_decision_points": (
        "activity_summary.total_decision_points",
        "total_trades",
        "trade_count",
    ),
    "trades_executed": ("activity_summary.trades_executed",),
    "reconfirmations": ("activity_summary.reconfirmations",),
}
WIN_LOSS_PATHS: Paths = ("winning_trades", "losing_trades")

# Round-trip trade records (entry/exit pairs)
TRADE_FIELDS: dict[str, Paths] = {
    "symbol": ("symbol",),
    "entry_timestamp": ("entry_date", "entry_time", "timestamp"),
    "exit_timestamp": ("exit_date", "exit_time"),
    "quantity": ("position_size", "shares", "quantity"),
    "entry_price": ("entry_price", "price"),
    "exit_price": ("exit_price",),
    "pnl": ("pnl", "realized_pnl"),
    "fees": ("fees", "transaction_costs"),
}

# Trade events (one record per BUY / SELL / UPDATE action)
TRADE_EVENT_FIELDS: dict[str, Paths] = {
    "symbol": ("symbol",),
    "action": ("action",),
    "timestamp": ("timestamp",),
    "quantity": ("position_size", "shares"),
    "price": ("price", "entry_price"),
    "pnl": ("pnl",),
    "fees": ("transaction_costs", "fees"),
}
CLOSING_ACTIONS = frozenset({"SELL"})
TRADE_LIST_PATHS: Paths = ("trades", "recent_trades", "trade_history", "history")

PERFORMANCE_FIELDS: dict[str, Paths] = {
    "total_return": ("total_return", "performance_metrics.total_return"),
    "sharpe_ratio": ("sharpe_ratio", "performance_metrics.sharpe_ratio"),
    "sortino_ratio": ("sortino_ratio", "performance_metrics.sortino_ratio"),
    "calmar_ratio": ("calmar_ratio", "performance_metrics.calmar_ratio"),
    "max_drawdown": ("max_drawdown", "performance_metrics.max_drawdown"),
    "win_rate": ("win_rate", "performance_metrics.win_rate"),
    "num_trades": ("trade_count", "num_trades", "total_trades"),
    "final_balance": ("balance", "final_balance", "current_balance"),
    "initial_balance": ("initial_balance", "config.initial_balance", "starting_balance"),
}

PREDICTION_FIELDS: dict[str, Paths] = {
    "action": ("action_type", "action", "decision"),
    "confidence": ("confidence",),
    "expected_return": ("expected_return",),
    "risk_score": ("risk_score",),
    "position_size": ("position_size", "position_size_pct"),
}
PREDICTION_METADATA_FIELDS: dict[str, Paths] = {
    "regime": ("market_regime", "regime", "metadata.market_regime", "metadata.regime"),
    "volatility": ("volatility", "metadata.volatility"),
    "stop_loss": ("stop_loss", "stop_loss_price", "metadata.stop_loss"),
    "take_profit": ("take_profit", "take_profit_price", "metadata.take_profit"),
}

MODEL_STATE_PREDICTION_PATHS: Paths = ("last_prediction", "model_state.last_prediction")
MODEL_STATE_TIMESTAMP_PATHS: Paths = ("timestamp", "model_state.timestamp")


def lookup(payload: Any, path: str) -> Any:
    """Follow a dotted path through nested mappings. Missing or null -> _MISSING."""
    node = payload
    for part in path.split("."):
        if not isinstance(node, Mapping):
            return _MISSING
        node = node.get(part)
        if node is None:
            return _MISSING
    return node


def resolve(payload: Any, paths: Iterable[str], default: Any = None) -> Any:
    for path in paths:
        value = lookup(payload, path)
        if value is not _MISSING:
            return value
    return default


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(f):
        return None
    return f


def resolve_float(payload: Any, paths: Iterable[str], default: Optional[float] = 0.0) -> Optional[float]:
    for path in paths:
        f = _as_float(lookup(payload, path))
        if f is not None:
            return f
    return default


def resolve_int(payload: Any, paths: Iterable[str], default: int = 0) -> int:
    f = resolve_float(payload, paths, None)
    return default if f is None else int(f)


def resolve_str(payload: Any, paths: Iterable[str], default: str = "") -> str:
    value = resolve(payload, paths)
    return default if value is None else str(value)


def has_any(payload: Any, paths: Iterable[str]) -> bool:
    return any(lookup(payload, p) is not _MISSING for p in paths)
