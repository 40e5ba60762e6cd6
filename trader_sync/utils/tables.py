"""Tabular views of trades and positions for terminal output."""

from __future__ import annotations
from dataclasses import asdict
from typing import Iterable

import pandas as pd

from trader_sync.core.types import Position, Trade

TRADE_COLUMNS = [
    "symbol", "entry_timestamp", "exit_timestamp", "quantity",
    "entry_price", "exit_price", "pnl", "fees",
]
POSITION_COLUMNS = ["symbol", "side", "quantity", "entry_price", "current_price", "unrealized_pnl"]


def trades_frame(trades: Iterable[Trade]) -> pd.DataFrame:
    """One row per trade; open trades show NaN exit fields."""
    df = pd.DataFrame([asdict(t) for t in trades], columns=TRADE_COLUMNS)
    df["status"] = df["exit_timestamp"].notna().map({True: "CLOSED", False: "OPEN"})
    return df


def positions_frame(positions: Iterable[Position]) -> pd.DataFrame:
    rows = []
    for p in positions:
        row = asdict(p)
        row["side"] = p.side.value
        rows.append(row)
    return pd.DataFrame(rows, columns=POSITION_COLUMNS)
