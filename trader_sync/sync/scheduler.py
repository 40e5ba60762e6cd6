"""
Polling scheduler: a repeating timer that runs only while the trader is LIVE.

At most one timer exists at a time. Every timer owns a CancelToken that is handed
to each tick, so work started by a tick can tell it has been cancelled.
"""

from __future__ import annotations
import logging
import threading
from enum import Enum
from typing import Callable, Optional

from trader_sync.core.types import TradingState

logger = logging.getLogger("trader_sync.scheduler")


class SchedulerState(str, Enum):
    ACTIVE = "ACTIVE"
    IDLE = "IDLE"


class CancelToken:
    """One-way cancellation flag shared between an owner and its workers."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to timeout; True if cancelled meanwhile."""
        return self._event.wait(timeout)


class RepeatingTimer(threading.Thread):
    """Calls callback(token) every interval seconds until the token is cancelled."""

    def __init__(self, interval: float, callback: Callable[[CancelToken], None], token: CancelToken):
        super().__init__(name="trader-sync-poll", daemon=True)
        self.interval = interval
        self.callback = callback
        self.token = token

    def run(self) -> None:
        while not self.token.wait(self.interval):
            try:
                self.callback(self.token)
            except Exception as e:
                # A failed poll waits for the next tick
                logger.exception("Poll tick failed: %s", e)

    def cancel(self) -> None:
        self.token.cancel()


TimerFactory = Callable[[float, Callable[[CancelToken], None], CancelToken], RepeatingTimer]


class PollingScheduler:
    """ACTIVE while a timer runs, IDLE otherwise."""

    def __init__(
        self,
        interval: float,
        tick: Callable[[CancelToken], None],
        timer_factory: TimerFactory = RepeatingTimer,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self._tick = tick
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Optional[RepeatingTimer] = None

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.ACTIVE if self.is_running() else SchedulerState.IDLE

    def is_running(self) -> bool:
        with self._lock:
            return self._timer is not None

    def start(self) -> bool:
        """Start the timer. Returns False when one is already running."""
        with self._lock:
            if self._timer is not None:
                return False
            timer = self._timer_factory(self.interval, self._tick, CancelToken())
            self._timer = timer
        timer.start()
        logger.info("Polling started (every %.0fs)", self.interval)
        return True

    def stop(self) -> bool:
        """Cancel the timer. Returns False when none was running."""
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is None:
            return False
        timer.cancel()
        logger.info("Polling stopped")
        return True

    def sync(self, trading_state: TradingState) -> None:
        """Follow the trader: poll while LIVE, idle otherwise."""
        if trading_state is TradingState.LIVE:
            self.start()
        else:
            self.stop()

    def close(self) -> None:
        self.stop()

    def __enter__(self) -> "PollingScheduler":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
