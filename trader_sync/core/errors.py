"""Exception hierarchy. Nothing here is fatal to the process."""

from __future__ import annotations
from typing import Optional


class TraderSyncError(Exception):
    """Base class for trader_sync errors."""


class ConfigError(TraderSyncError):
    """Invalid configuration value."""


class TransportError(TraderSyncError):
    """
    Failed request. status_code is None when the server was never reached
    (DNS, connection refused, timeout).
    """

    def __init__(self, status_code: Optional[int], reason: str = "", body: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        if status_code is None:
            msg = f"API Error: {reason or 'network failure'}"
        else:
            msg = f"API Error: {status_code} {reason} - {body or 'No error details'}"
        super().__init__(msg)

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class TraderInactiveError(TraderSyncError):
    """Requested data that only exists while the remote trader is running."""

    def __init__(self, message: str = "Trading not active"):
        super().__init__(message)
