"""
Single-slot toast: a new message replaces the current one and restarts the
auto-dismiss timer. A timer left over from a replaced message never clears the
newer one.
"""

from __future__ import annotations
import logging
import threading
from typing import Callable, List, Optional

from trader_sync.core.types import Severity, ToastMessage

logger = logging.getLogger("trader_sync.toast")

ToastListener = Callable[[Optional[ToastMessage]], None]


class ToastQueue:
    def __init__(self, default_lifetime: float = 4.0):
        if default_lifetime <= 0:
            raise ValueError(f"default_lifetime must be positive, got {default_lifetime}")
        self.default_lifetime = default_lifetime
        self._lock = threading.Lock()
        self._current: Optional[ToastMessage] = None
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._listeners: List[ToastListener] = []

    @property
    def current(self) -> Optional[ToastMessage]:
        with self._lock:
            return self._current

    def subscribe(self, listener: ToastListener) -> None:
        """listener(message) on every change; None means the slot was cleared."""
        self._listeners.append(listener)

    def _notify(self, message: Optional[ToastMessage]) -> None:
        for listener in list(self._listeners):
            try:
                listener(message)
            except Exception as e:
                logger.exception("Toast listener failed: %s", e)

    def enqueue(self, text: str, severity: Severity, lifetime: Optional[float] = None) -> ToastMessage:
        lifetime = self.default_lifetime if lifetime is None else lifetime
        if lifetime <= 0:
            raise ValueError(f"lifetime must be positive, got {lifetime}")
        message = ToastMessage(text=text, severity=Severity(severity), lifetime=lifetime)
        with self._lock:
            self._generation += 1
            generation = self._generation
            old_timer = self._timer
            self._current = message
            self._timer = threading.Timer(message.lifetime, self._expire, args=(generation,))
            self._timer.daemon = True
            self._timer.start()
        if old_timer is not None:
            old_timer.cancel()
        log = logger.warning if message.severity is Severity.ERROR else logger.info
        log("Toast: %s", text)
        self._notify(message)
        return message

    def success(self, text: str, lifetime: Optional[float] = None) -> ToastMessage:
        return self.enqueue(text, Severity.SUCCESS, lifetime)

    def error(self, text: str, lifetime: Optional[float] = None) -> ToastMessage:
        return self.enqueue(text, Severity.ERROR, lifetime)

    def _expire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._current is None:
                return
            self._current = None
            self._timer = None
        self._notify(None)

    def dismiss(self) -> None:
        """Clear the slot now. Safe to call when empty."""
        with self._lock:
            timer = self._timer
            had_message = self._current is not None
            self._generation += 1
            self._current = None
            self._timer = None
        if timer is not None:
            timer.cancel()
        if had_message:
            self._notify(None)

    def close(self) -> None:
        with self._lock:
            timer, self._timer = self._timer, None
            self._generation += 1
        if timer is not None:
            timer.cancel()
