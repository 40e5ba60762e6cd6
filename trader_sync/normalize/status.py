"""
Status payload -> Snapshot.

Trading state is LIVE when the boolean flag is true OR the status string is an
active token. Both checks stay: schema migrations moved the signal from one field
to the other without removing the old one.
"""

from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from trader_sync.core.types import (
    ActivitySummary,
    ModelState,
    PortfolioSummary,
    Position,
    PositionSide,
    Snapshot,
    TradingState,
)
from trader_sync.normalize import fields as F
from trader_sync.normalize.predictions import normalize_prediction

logger = logging.getLogger("trader_sync.normalize")


def is_active(payload: Any) -> bool:
    if not isinstance(payload, Mapping):
        return False
    if payload.get(F.ACTIVE_FLAG) is True:
        return True
    status = payload.get(F.STATUS_KEY)
    return isinstance(status, str) and status.strip().lower() in F.ACTIVE_STATUS_TOKENS


def trading_state_of(payload: Any) -> TradingState:
    return TradingState.LIVE if is_active(payload) else TradingState.STOPPED


def _is_position_record(value: Any) -> bool:
    return isinstance(value, Mapping) and F.has_any(value, F.POSITION_RECORD_PATHS)


def _keyed_records(by_symbol: Mapping) -> List[Mapping]:
    """{symbol: record} -> records carrying their symbol. Non-record values are skipped."""
    return [
        {"symbol": symbol, **rec}
        for symbol, rec in by_symbol.items()
        if symbol not in F.POSITION_CONTAINER_KEYS and _is_position_record(rec)
    ]


def _position_records(payload: Mapping) -> List[Mapping]:
    for path in F.POSITION_LIST_PATHS:
        records = F.lookup(payload, path)
        if isinstance(records, list):
            return [r for r in records if isinstance(r, Mapping)]
        if isinstance(records, Mapping):
            return _keyed_records(records)
    # Older backends key position_details by symbol
    details = F.lookup(payload, F.POSITION_MAP_PATH)
    if not isinstance(details, Mapping):
        return []
    return _keyed_records(details)


def normalize_position(record: Mapping) -> Optional[Position]:
    """One raw position record -> Position, or None without a symbol."""
    symbol = F.resolve_str(record, F.POSITION_FIELDS["symbol"]).strip()
    if not symbol:
        return None
    shares = F.resolve_float(record, F.POSITION_FIELDS["shares"])
    direction = F.resolve_str(record, F.POSITION_FIELDS["direction"]).strip().lower()
    if direction in F.SHORT_TOKENS and shares > 0:
        shares = -shares
    entry = F.resolve_float(record, F.POSITION_FIELDS["entry_price"])
    current = F.resolve_float(record, F.POSITION_FIELDS["current_price"], None)
    return Position(
        symbol=symbol,
        side=PositionSide.LONG if shares >= 0 else PositionSide.SHORT,
        quantity=abs(shares),
        entry_price=max(entry, 0.0),
        current_price=max(entry if current is None else current, 0.0),
        unrealized_pnl=F.resolve_float(record, F.POSITION_FIELDS["unrealized_pnl"]),
    )


def normalize_positions(payload: Mapping) -> List[Position]:
    positions: List[Position] = []
    seen = set()
    for record in _position_records(payload):
        pos = normalize_position(record)
        if pos is None:
            continue
        if pos.symbol in seen:
            logger.debug("Duplicate position for %s dropped", pos.symbol)
            continue
        seen.add(pos.symbol)
        positions.append(pos)
    return positions


def normalize_portfolio_summary(payload: Mapping) -> PortfolioSummary:
    t = F.PORTFOLIO_FIELDS
    return PortfolioSummary(
        portfolio_value=F.resolve_float(payload, t["portfolio_value"]),
        unrealized_pnl=F.resolve_float(payload, t["unrealized_pnl"]),
        realized_pnl=F.resolve_float(payload, t["realized_pnl"]),
        total_pnl=F.resolve_float(payload, t["total_pnl"]),
        drawdown=F.resolve_float(payload, t["drawdown"]),
        balance=F.resolve_float(payload, t["balance"]),
        daily_pnl=F.resolve_float(payload, t["daily_pnl"]),
        win_rate=F.resolve_float(payload, t["win_rate"]),
        trade_count=F.resolve_int(payload, t["trade_count"]),
    )


def closed_trade_count(payload: Mapping) -> Optional[int]:
    """winning + losing when either is reported, else None."""
    if not F.has_any(payload, F.WIN_LOSS_PATHS):
        return None
    return sum(F.resolve_int(payload, (p,)) for p in F.WIN_LOSS_PATHS)


def normalize_activity_summary(payload: Mapping) -> ActivitySummary:
    t = F.ACTIVITY_FIELDS
    executed = F.resolve_float(payload, t["trades_executed"], None)
    if executed is None:
        executed = closed_trade_count(payload) or 0
    return ActivitySummary(
        total_decision_points=F.resolve_int(payload, t["total_decision_points"]),
        trades_executed=int(executed),
        reconfirmations=F.resolve_int(payload, t["reconfirmations"]),
    )


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_model_state(payload: Any) -> ModelState:
    """
    Last decision record. Prefers an explicit last_prediction object; otherwise the
    newest entry of recent_trades stands in for it.
    """
    if not isinstance(payload, Mapping):
        return ModelState(last_prediction=None, timestamp=_now_iso())
    timestamp = F.resolve_str(payload, F.MODEL_STATE_TIMESTAMP_PATHS) or _now_iso()
    explicit = F.resolve(payload, F.MODEL_STATE_PREDICTION_PATHS)
    if isinstance(explicit, Mapping):
        return ModelState(last_prediction=normalize_prediction(explicit), timestamp=timestamp)
    trades = F.lookup(payload, "recent_trades")
    if isinstance(trades, list):
        events = [t for t in trades if isinstance(t, Mapping)]
        if events:
            last = events[-1]
            return ModelState(
                last_prediction=normalize_prediction(last, default_action="HOLD"),
                timestamp=F.resolve_str(last, ("timestamp",)) or timestamp,
            )
    return ModelState(last_prediction=None, timestamp=timestamp)


def normalize_status(payload: Any, model_state: Optional[ModelState] = None) -> Snapshot:
    """
    Raw status payload -> Snapshot. Never raises on malformed input; anything that
    is not an active payload becomes STOPPED with positions and summaries dropped.
    """
    state = trading_state_of(payload)
    if state is not TradingState.LIVE:
        if isinstance(payload, Mapping):
            logger.debug(
                "Trading not running (status=%r, is_trading=%r)",
                payload.get(F.STATUS_KEY), payload.get(F.ACTIVE_FLAG),
            )
        return Snapshot(state)
    positions = normalize_positions(payload)
    logger.debug("Parsed %d positions", len(positions))
    return Snapshot(
        trading_state=state,
        positions=tuple(positions),
        portfolio_summary=normalize_portfolio_summary(payload),
        activity_summary=normalize_activity_summary(payload),
        model_state=model_state,
    )
