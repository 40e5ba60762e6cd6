"""Utils: Telegram notifications, terminal tables."""

from trader_sync.utils.telegram import send_telegram, telegram_trade_listener
from trader_sync.utils.tables import trades_frame, positions_frame

__all__ = ["send_telegram", "telegram_trade_listener", "trades_frame", "positions_frame"]
