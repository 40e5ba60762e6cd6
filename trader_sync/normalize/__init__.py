"""Normalize: backend payload variants -> canonical snapshot, trades, metrics, predictions."""

from trader_sync.normalize.status import (
    normalize_status,
    normalize_positions,
    normalize_model_state,
    trading_state_of,
)
from trader_sync.normalize.trades import normalize_trades
from trader_sync.normalize.performance import normalize_performance
from trader_sync.normalize.predictions import normalize_prediction

__all__ = [
    "normalize_status",
    "normalize_positions",
    "normalize_model_state",
    "trading_state_of",
    "normalize_trades",
    "normalize_performance",
    "normalize_prediction",
]
