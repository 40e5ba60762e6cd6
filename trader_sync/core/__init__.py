"""Core: config, types, errors, logging."""

from trader_sync.core.config import load_config, Config
from trader_sync.core.errors import (
    TraderSyncError,
    ConfigError,
    TransportError,
    TraderInactiveError,
)
from trader_sync.core.types import (
    TradingState,
    PositionSide,
    Severity,
    Position,
    PortfolioSummary,
    ActivitySummary,
    Prediction,
    ModelState,
    Snapshot,
    Trade,
    PerformanceMetrics,
    PerformanceReport,
    ToastMessage,
    TradeExecutedEvent,
    TraderConfig,
    StartRequest,
)
from trader_sync.core.logger import setup_logging

__all__ = [
    "load_config",
    "Config",
    "TraderSyncError",
    "ConfigError",
    "TransportError",
    "TraderInactiveError",
    "TradingState",
    "PositionSide",
    "Severity",
    "Position",
    "PortfolioSummary",
    "ActivitySummary",
    "Prediction",
    "ModelState",
    "Snapshot",
    "Trade",
    "PerformanceMetrics",
    "PerformanceReport",
    "ToastMessage",
    "TradeExecutedEvent",
    "TraderConfig",
    "StartRequest",
    "setup_logging",
]
