"""
Trading service: one method per remote operation, returning canonical types.

Reads go through the response cache (keyed by endpoint path, so resources served
from the same path share one fetch). Status reads never raise on transport
failure; they degrade to a STOPPED snapshot. Action calls propagate errors.
"""

from __future__ import annotations
import logging
from typing import Callable, List, Optional

from trader_sync.cache.response_cache import ResponseCache
from trader_sync.core.config import Config
from trader_sync.core.errors import TraderSyncError, TransportError
from trader_sync.core.types import (
    ModelState,
    PerformanceReport,
    Prediction,
    Snapshot,
    StartRequest,
    Trade,
)
from trader_sync.normalize import (
    normalize_model_state,
    normalize_performance,
    normalize_prediction,
    normalize_status,
    normalize_trades,
)
from trader_sync.transport.base import Transport

logger = logging.getLogger("trader_sync.service")


class TradingService:
    """Remote trader operations over a Transport, with cached reads."""

    def __init__(
        self,
        transport: Transport,
        endpoints: dict[str, str],
        cache: Optional[ResponseCache] = None,
        status_ttl: float = 5.0,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._transport = transport
        self._endpoints = dict(endpoints)
        if cache is None:
            kwargs = {"clock": clock} if clock is not None else {}
            cache = ResponseCache(
                transport.get_json,
                ttl=status_ttl,
                ttls={self._endpoints["status"]: status_ttl},
                **kwargs,
            )
        self.cache = cache

    @classmethod
    def from_config(cls, config: Config, transport: Transport) -> "TradingService":
        return cls(transport, config.endpoints, status_ttl=config.status_cache_ttl)

    def _path(self, resource: str) -> str:
        return self._endpoints[resource]

    def fetch_status_payload(self):
        """Raw status payload, cached. Raises TransportError."""
        return self.cache.get(self._path("status"))

    def get_snapshot(self) -> Snapshot:
        try:
            payload = self.fetch_status_payload()
        except TransportError as e:
            logger.error("Failed to fetch status: %s", e)
            return Snapshot.stopped()
        snapshot = normalize_status(payload)
        if not snapshot.is_live:
            return snapshot
        try:
            model_state = self.get_model_state()
        except TraderSyncError as e:
            logger.warning("Failed to fetch model state: %s", e)
            return snapshot
        return normalize_status(payload, model_state=model_state)

    def get_model_state(self) -> ModelState:
        return normalize_model_state(self.cache.get(self._path("model_state")))

    def get_trade_history(self) -> List[Trade]:
        trades = normalize_trades(self.cache.get(self._path("trade_history")))
        logger.debug("Trade history: %d records", len(trades))
        return trades

    def get_performance(self) -> PerformanceReport:
        """Raises TraderInactiveError when the backend reports trading stopped."""
        payload = self.cache.get(self._path("performance"))
        report = normalize_performance(payload)
        logger.debug("Performance metrics: %s", report.metrics)
        return report

    def get_prediction(self, symbol: str) -> Prediction:
        data = self._transport.post_json(self._path("predict"), {"symbol": symbol})
        return normalize_prediction(data)

    def start(self, request: StartRequest) -> dict:
        logger.info("Starting trader: symbols=%s config=%s", list(request.symbols), request.config.to_dict())
        result = self._transport.post_json(self._path("start"), request.to_payload())
        self.cache.invalidate()
        logger.info("Start response: %s", result)
        return result if isinstance(result, dict) else {}

    def stop(self) -> dict:
        logger.info("Stopping trader")
        result = self._transport.post_json(self._path("stop"))
        self.cache.invalidate()
        return result if isinstance(result, dict) else {}

    def close(self) -> None:
        self._transport.close()
