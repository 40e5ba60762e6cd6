"""Transport: abstract interface and requests-based HTTP implementation."""

from trader_sync.transport.base import Transport
from trader_sync.transport.http import HttpTransport

__all__ = ["Transport", "HttpTransport"]
