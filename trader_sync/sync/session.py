"""
Trader session: the composition consumers talk to.

Owns the scheduler, detector, task tracker and toast queue, and keeps the latest
snapshot plus the on-demand views (trade history, performance, prediction).
Snapshots are applied one at a time in request order; once the session is closed,
late results are dropped without touching state.
"""

from __future__ import annotations
import itertools
import logging
import threading
from typing import Callable, List, Optional, Tuple

from trader_sync.core.config import Config
from trader_sync.core.errors import TraderSyncError
from trader_sync.core.types import (
    PerformanceReport,
    Prediction,
    Snapshot,
    StartRequest,
    Trade,
    TradeExecutedEvent,
)
from trader_sync.service import TradingService
from trader_sync.sync.detector import TradeDetector
from trader_sync.sync.scheduler import CancelToken, PollingScheduler, RepeatingTimer, TimerFactory
from trader_sync.sync.tasks import TaskKind, TaskTracker
from trader_sync.sync.toast import ToastQueue
from trader_sync.transport.base import Transport
from trader_sync.transport.http import HttpTransport

logger = logging.getLogger("trader_sync.session")

SnapshotListener = Callable[[Snapshot], None]
TradeListener = Callable[[TradeExecutedEvent], None]


class TraderSession:
    def __init__(
        self,
        service: TradingService,
        poll_interval: float = 300.0,
        toasts: Optional[ToastQueue] = None,
        trade_toast_lifetime: float = 3.0,
        detector: Optional[TradeDetector] = None,
        tasks: Optional[TaskTracker] = None,
        timer_factory: TimerFactory = RepeatingTimer,
    ):
        self.service = service
        self.toasts = toasts or ToastQueue()
        self.trade_toast_lifetime = trade_toast_lifetime
        self.detector = detector or TradeDetector()
        self.tasks = tasks or TaskTracker()
        self.scheduler = PollingScheduler(poll_interval, self._on_tick, timer_factory)

        self._lock = threading.RLock()
        self._seq = itertools.count(1)
        self._applied_seq = 0
        self._closed = CancelToken()
        self._snapshot = Snapshot.pending()
        self._trades: Tuple[Trade, ...] = ()
        self._performance: Optional[PerformanceReport] = None
        self._prediction: Optional[Prediction] = None
        self._snapshot_listeners: List[SnapshotListener] = []
        self._trade_listeners: List[TradeListener] = []

    @classmethod
    def from_config(cls, config: Config, transport: Optional[Transport] = None) -> "TraderSession":
        transport = transport or HttpTransport(
            config.api_base_url, config.api_key, timeout=config.request_timeout
        )
        return cls(
            TradingService.from_config(config, transport),
            poll_interval=config.poll_interval,
            toasts=ToastQueue(config.toast_lifetime),
            trade_toast_lifetime=config.trade_toast_lifetime,
        )

    # --- state -------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot

    @property
    def trades(self) -> Tuple[Trade, ...]:
        with self._lock:
            return self._trades

    @property
    def performance(self) -> Optional[PerformanceReport]:
        with self._lock:
            return self._performance

    @property
    def prediction(self) -> Optional[Prediction]:
        with self._lock:
            return self._prediction

    @property
    def closed(self) -> bool:
        return self._closed.cancelled

    def on_snapshot(self, listener: SnapshotListener) -> None:
        self._snapshot_listeners.append(listener)

    def on_trade(self, listener: TradeListener) -> None:
        self._trade_listeners.append(listener)

    # --- snapshot pipeline -------------------------------------------------

    def _fetch_and_apply(self, token: Optional[CancelToken] = None) -> Snapshot:
        seq = next(self._seq)
        try:
            snapshot = self.service.get_snapshot()
        except Exception as e:
            logger.exception("Failed to fetch data: %s", e)
            self._error("Failed to fetch latest data.")
            snapshot = Snapshot.stopped()
        return self._apply(seq, snapshot, token)

    def _apply(self, seq: int, snapshot: Snapshot, token: Optional[CancelToken] = None) -> Snapshot:
        with self._lock:
            if self._closed.cancelled or (token is not None and token.cancelled):
                logger.debug("Dropping snapshot #%d: consumer gone", seq)
                return self._snapshot
            if seq < self._applied_seq:
                logger.debug("Dropping snapshot #%d: #%d already applied", seq, self._applied_seq)
                return self._snapshot
            self._applied_seq = seq
            self._snapshot = snapshot
            event = self.detector.observe(snapshot)
            self.scheduler.sync(snapshot.trading_state)
            for listener in list(self._snapshot_listeners):
                self._call(listener, snapshot)
            if event is not None:
                self._success(
                    f"New trade executed ({event.delta} new, {event.total} total)",
                    lifetime=self.trade_toast_lifetime,
                )
            trade_listeners = list(self._trade_listeners) if event is not None else []
        # Trade sinks may block on the network; keep them off the state lock
        for listener in trade_listeners:
            self._call(listener, event)
        return snapshot

    def _success(self, text: str, lifetime: Optional[float] = None) -> None:
        if not self.closed:
            self.toasts.success(text, lifetime=lifetime)

    def _error(self, text: str) -> None:
        if not self.closed:
            self.toasts.error(text)

    @staticmethod
    def _call(listener, value) -> None:
        try:
            listener(value)
        except Exception as e:
            logger.exception("Listener failed: %s", e)

    def _on_tick(self, token: CancelToken) -> None:
        if token.cancelled or self.closed:
            return
        self._fetch_and_apply(token)

    # --- operations --------------------------------------------------------

    def load(self) -> Snapshot:
        """Initial load."""
        with self.tasks.track(TaskKind.INITIAL_LOAD):
            return self._fetch_and_apply()

    def refresh(self) -> Snapshot:
        with self.tasks.track(TaskKind.REFRESH):
            snapshot = self._fetch_and_apply()
            self._success("Data refreshed.")
            return snapshot

    def start(self, request: StartRequest) -> bool:
        with self.tasks.track(TaskKind.START):
            try:
                self.service.start(request)
            except TraderSyncError as e:
                logger.error("Failed to start trader: %s", e)
                self._error(str(e))
                return False
            self._fetch_and_apply()
            self._success("Live trading started successfully!")
            return True

    def stop(self) -> bool:
        with self.tasks.track(TaskKind.STOP):
            try:
                self.service.stop()
            except TraderSyncError as e:
                logger.error("Failed to stop trader: %s", e)
                self._error(str(e))
                return False
            self._apply(next(self._seq), Snapshot.stopped())
            self._success("Trading has been stopped.")
            return True

    def fetch_trade_history(self) -> Tuple[Trade, ...]:
        with self.tasks.track(TaskKind.TRADE_HISTORY):
            try:
                trades = tuple(self.service.get_trade_history())
            except TraderSyncError as e:
                logger.error("Failed to fetch trade history: %s", e)
                self._error(str(e) or "Could not load trade history.")
                trades = ()
            with self._lock:
                if not self.closed:
                    self._trades = trades
            return trades

    def fetch_performance(self) -> Optional[PerformanceReport]:
        with self.tasks.track(TaskKind.PERFORMANCE):
            try:
                report = self.service.get_performance()
            except TraderSyncError as e:
                logger.error("Failed to fetch performance metrics: %s", e)
                self._error(str(e) or "Could not load performance data.")
                report = None
            with self._lock:
                if not self.closed:
                    self._performance = report
            return report

    def fetch_prediction(self, symbol: str) -> Optional[Prediction]:
        symbol = symbol.strip().upper()
        if not symbol:
            raise ValueError("symbol is required")
        with self.tasks.track(TaskKind.PREDICTION):
            with self._lock:
                self._prediction = None
            try:
                prediction = self.service.get_prediction(symbol)
            except TraderSyncError as e:
                logger.error("Failed to fetch prediction for %s: %s", symbol, e)
                self._error(str(e) or f"Could not get prediction for {symbol}.")
                prediction = None
            with self._lock:
                if not self.closed:
                    self._prediction = prediction
            return prediction

    # --- teardown ----------------------------------------------------------

    def close(self) -> None:
        """Cancel polling and ignore anything still in flight. Idempotent."""
        if self._closed.cancelled:
            return
        self._closed.cancel()
        self.scheduler.close()
        self.toasts.close()
        self.service.close()

    def __enter__(self) -> "TraderSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
