"""
Load configuration from config.yaml and .env. API key and Telegram token only from env.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from trader_sync.core.errors import ConfigError

DEFAULT_ENDPOINTS = {
    "status": "/api/v1/rl/live/status",
    "start": "/api/v1/rl/live/start",
    "stop": "/api/v1/rl/live/stop",
    # Trade history and model state ride on the status payload in the current backend
    "trade_history": "/api/v1/rl/live/status",
    "performance": "/api/v1/rl/state",
    "predict": "/api/v1/rl/predict",
    "model_state": "/api/v1/rl/live/status",
}


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path(__file__).resolve().parents[2]
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> "Config":
    """Load config.yaml and overlay with env. Returns Config."""
    load_dotenv_if_exists(project_root)
    root = project_root or Path(__file__).resolve().parents[2]
    path = config_path or root / "config.yaml"
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: str = "") -> str:
        return os.getenv(key, default).strip()

    def env_float(key: str, default: float = 0.0) -> float:
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default

    api = data.get("api", {})
    sync = data.get("sync", {})
    notifications = data.get("notifications", {})
    telegram = data.get("telegram", {})
    logging_cfg = data.get("logging", {})

    endpoints = dict(DEFAULT_ENDPOINTS)
    endpoints.update({k: str(v) for k, v in (data.get("endpoints") or {}).items()})

    return Config(
        api_base_url=env("TRADER_API_URL", api.get("base_url", "http://localhost:8000")),
        # Never read from config.yaml: keys stay out of version control
        api_key=env("TRADER_API_KEY"),
        request_timeout=env_float("REQUEST_TIMEOUT", api.get("timeout", 15.0)),
        status_cache_ttl=env_float("STATUS_CACHE_TTL", sync.get("status_cache_ttl", 5.0)),
        poll_interval=env_float("POLL_INTERVAL", sync.get("poll_interval", 300.0)),
        toast_lifetime=env_float("TOAST_LIFETIME", notifications.get("toast_lifetime", 4.0)),
        trade_toast_lifetime=env_float(
            "TRADE_TOAST_LIFETIME", notifications.get("trade_toast_lifetime", 3.0)
        ),
        endpoints=endpoints,
        telegram_bot_token=env("TELEGRAM_BOT_TOKEN", telegram.get("bot_token", "")),
        telegram_chat_id=env("TELEGRAM_CHAT_ID", str(telegram.get("chat_id", ""))),
        log_level=logging_cfg.get("level", "INFO"),
        log_dir=Path(logging_cfg.get("log_dir", "logs")),
        log_file=logging_cfg.get("log_file", "trader_sync.log"),
    )


class Config:
    """Unified configuration. Immutable after load."""

    __slots__ = (
        "api_base_url", "api_key", "request_timeout",
        "status_cache_ttl", "poll_interval",
        "toast_lifetime", "trade_toast_lifetime",
        "endpoints",
        "telegram_bot_token", "telegram_chat_id",
        "log_level", "log_dir", "log_file",
    )

    def __init__(
        self,
        api_base_url: str = "http://localhost:8000",
        api_key: str = "",
        request_timeout: float = 15.0,
        status_cache_ttl: float = 5.0,
        poll_interval: float = 300.0,
        toast_lifetime: float = 4.0,
        trade_toast_lifetime: float = 3.0,
        endpoints: Optional[dict] = None,
        telegram_bot_token: str = "",
        telegram_chat_id: str = "",
        log_level: str = "INFO",
        log_dir: Path = None,
        log_file: str = "trader_sync.log",
    ):
        for name, value in (
            ("request_timeout", request_timeout),
            ("status_cache_ttl", status_cache_ttl),
            ("poll_interval", poll_interval),
            ("toast_lifetime", toast_lifetime),
            ("trade_toast_lifetime", trade_toast_lifetime),
        ):
            if value <= 0:
                raise ConfigError(f"{name} must be positive, got {value}")
        self.api_base_url = api_base_url.rstrip("/")
        self.api_key = api_key
        self.request_timeout = float(request_timeout)
        self.status_cache_ttl = float(status_cache_ttl)
        self.poll_interval = float(poll_interval)
        self.toast_lifetime = float(toast_lifetime)
        self.trade_toast_lifetime = float(trade_toast_lifetime)
        self.endpoints = {**DEFAULT_ENDPOINTS, **(endpoints or {})}
        self.telegram_bot_token = telegram_bot_token
        self.telegram_chat_id = telegram_chat_id
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.log_file = log_file

    def endpoint(self, resource: str) -> str:
        try:
            return self.endpoints[resource]
        except KeyError:
            raise ConfigError(f"No endpoint configured for {resource!r}") from None
