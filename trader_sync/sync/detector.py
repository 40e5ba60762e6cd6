"""
New-trade detection from successive snapshots.

The first LIVE snapshot only sets the baseline, so a fresh client does not report
every historical trade. After that, any increase of the decision-point counter is
reported with its delta. The stored count is updated on every LIVE snapshot,
including decreases (a restarted backend counts from zero again).
"""

from __future__ import annotations
import logging
import threading
from typing import Optional

from trader_sync.core.types import Snapshot, TradeExecutedEvent

logger = logging.getLogger("trader_sync.detector")


class TradeDetector:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_count: Optional[int] = None

    @property
    def last_count(self) -> Optional[int]:
        return self._last_count

    def observe(self, snapshot: Snapshot) -> Optional[TradeExecutedEvent]:
        if not snapshot.is_live or snapshot.activity_summary is None:
            return None
        count = snapshot.activity_summary.total_decision_points
        with self._lock:
            previous, self._last_count = self._last_count, count
        if previous is None or count <= previous:
            return None
        event = TradeExecutedEvent(delta=count - previous, total=count)
        logger.info("New trade(s) executed: +%d (total %d)", event.delta, event.total)
        return event

    def reset(self) -> None:
        with self._lock:
            self._last_count = None
