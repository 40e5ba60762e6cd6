"""Sync: polling scheduler, trade detector, task tracker, toast queue, session."""

from trader_sync.sync.scheduler import CancelToken, PollingScheduler, RepeatingTimer, SchedulerState
from trader_sync.sync.detector import TradeDetector
from trader_sync.sync.tasks import TaskKind, TaskTracker
from trader_sync.sync.toast import ToastQueue
from trader_sync.sync.session import TraderSession

__all__ = [
    "CancelToken",
    "PollingScheduler",
    "RepeatingTimer",
    "SchedulerState",
    "TradeDetector",
    "TaskKind",
    "TaskTracker",
    "ToastQueue",
    "TraderSession",
]
