"""
Short-lived response cache keyed by resource.

A fresh entry is served without touching the transport. A miss issues exactly one
load per key; callers that arrive while it is in flight wait on the same Future and
get the same payload or exception. On 429 the last entry is served even if expired.
"""

from __future__ import annotations
import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from trader_sync.core.errors import TransportError

logger = logging.getLogger("trader_sync.cache")


@dataclass(frozen=True)
class CacheEntry:
    payload: Any
    captured_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.captured_at < ttl


class ResponseCache:
    """Memoizes loader(key) for ttl seconds with single-flight loads."""

    def __init__(
        self,
        loader: Callable[[str], Any],
        ttl: float = 5.0,
        ttls: Optional[Dict[str, float]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self.ttl = ttl
        self._ttls = dict(ttls or {})
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, CacheEntry] = {}
        self._inflight: Dict[str, Future] = {}

    def ttl_for(self, key: str) -> float:
        return self._ttls.get(key, self.ttl)

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Current entry, fresh or not. Never loads."""
        with self._lock:
            return self._entries.get(key)

    def get(self, key: str) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_fresh(self._clock(), self.ttl_for(key)):
                logger.debug("Cache hit: %s", key)
                return entry.payload
            pending = self._inflight.get(key)
            if pending is None:
                pending = Future()
                self._inflight[key] = pending
                owner = True
            else:
                owner = False
        if not owner:
            logger.debug("Joining in-flight load: %s", key)
            return pending.result()
        self._load(key, pending)
        return pending.result()

    def _load(self, key: str, pending: Future) -> None:
        logger.debug("Cache miss, loading: %s", key)
        try:
            payload = self._loader(key)
        except TransportError as e:
            with self._lock:
                stale = self._entries.get(key)
                del self._inflight[key]
            if e.is_rate_limited and stale is not None:
                logger.info("Rate limited on %s, serving stale entry", key)
                pending.set_result(stale.payload)
            else:
                pending.set_exception(e)
            return
        except BaseException as e:
            with self._lock:
                del self._inflight[key]
            pending.set_exception(e)
            return
        with self._lock:
            self._entries[key] = CacheEntry(payload, self._clock())
            del self._inflight[key]
        pending.set_result(payload)

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one entry, or all entries when key is None. In-flight loads are untouched."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)
