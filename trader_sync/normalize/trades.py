"""
Trade history payloads -> Trade list.

Two record shapes exist: round-trip records (entry_date / exit_date) and action
events (one BUY / SELL / UPDATE per record). An event is closed only when its
action is a closing action; pnl on open events is reported as 0.
"""

from __future__ import annotations
from typing import Any, List, Mapping

from trader_sync.core.types import Trade
from trader_sync.normalize import fields as F


def _trade_records(payload: Any) -> List[Mapping]:
    records: Any = payload
    if isinstance(payload, Mapping):
        records = F.resolve(payload, F.TRADE_LIST_PATHS, [])
    if not isinstance(records, list):
        return []
    return [r for r in records if isinstance(r, Mapping)]


def _from_event(record: Mapping) -> Trade:
    t = F.TRADE_EVENT_FIELDS
    action = F.resolve_str(record, t["action"]).strip().upper()
    timestamp = F.resolve_str(record, t["timestamp"])
    price = F.resolve_float(record, t["price"])
    closed = action in F.CLOSING_ACTIONS
    return Trade(
        symbol=F.resolve_str(record, t["symbol"]),
        entry_timestamp=timestamp,
        exit_timestamp=timestamp if closed else None,
        quantity=abs(F.resolve_float(record, t["quantity"])),
        entry_price=price,
        exit_price=price if closed else None,
        pnl=F.resolve_float(record, t["pnl"]) if closed else 0.0,
        fees=F.resolve_float(record, t["fees"]),
    )


def _from_round_trip(record: Mapping) -> Trade:
    t = F.TRADE_FIELDS
    exit_ts = F.resolve(record, t["exit_timestamp"])
    closed = exit_ts is not None
    return Trade(
        symbol=F.resolve_str(record, t["symbol"]),
        entry_timestamp=F.resolve_str(record, t["entry_timestamp"]),
        exit_timestamp=str(exit_ts) if closed else None,
        quantity=abs(F.resolve_float(record, t["quantity"])),
        entry_price=F.resolve_float(record, t["entry_price"]),
        exit_price=F.resolve_float(record, t["exit_price"], None) if closed else None,
        pnl=F.resolve_float(record, t["pnl"]) if closed else 0.0,
        fees=F.resolve_float(record, t["fees"]),
    )


def normalize_trade(record: Mapping) -> Trade:
    if F.has_any(record, ("action",)):
        return _from_event(record)
    return _from_round_trip(record)


def normalize_trades(payload: Any) -> List[Trade]:
    """Accepts a bare list or an object holding one under a known key."""
    return [normalize_trade(r) for r in _trade_records(payload)]
