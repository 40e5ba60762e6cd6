"""Live status sync client for a remote automated-trading service."""

from trader_sync.core import Config, load_config, setup_logging
from trader_sync.service import TradingService
from trader_sync.sync import TraderSession

__version__ = "0.1.0"

__all__ = ["Config", "load_config", "setup_logging", "TradingService", "TraderSession"]
