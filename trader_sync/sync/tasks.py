"""Busy flags per category of user-triggered operation."""

from __future__ import annotations
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Dict, FrozenSet, Iterator


class TaskKind(str, Enum):
    INITIAL_LOAD = "initial_load"
    START = "start"
    STOP = "stop"
    REFRESH = "refresh"
    TRADE_HISTORY = "trade_history"
    PERFORMANCE = "performance"
    PREDICTION = "prediction"


ACTION_KINDS = frozenset({TaskKind.START, TaskKind.STOP})


class TaskTracker:
    """
    Independent flags: one kind being busy never affects another. Overlapping
    operations of the same kind keep the flag set until the last one finishes.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: Dict[TaskKind, int] = {kind: 0 for kind in TaskKind}

    @contextmanager
    def track(self, kind: TaskKind) -> Iterator[None]:
        with self._lock:
            self._active[kind] += 1
        try:
            yield
        finally:
            with self._lock:
                self._active[kind] -= 1

    def is_busy(self, kind: TaskKind) -> bool:
        with self._lock:
            return self._active[kind] > 0

    def busy_kinds(self) -> FrozenSet[TaskKind]:
        with self._lock:
            return frozenset(k for k, n in self._active.items() if n > 0)

    def any_busy(self) -> bool:
        return bool(self.busy_kinds())

    def is_action_busy(self) -> bool:
        """Start or stop in flight (gates both buttons)."""
        return bool(self.busy_kinds() & ACTION_KINDS)
