"""Unit tests for sync.scheduler."""

import threading

import pytest

from trader_sync.core.types import TradingState
from trader_sync.sync.scheduler import CancelToken, PollingScheduler, RepeatingTimer, SchedulerState


def test_live_live_creates_one_timer_and_stopped_cancels(timer_factory):
    sched = PollingScheduler(300.0, lambda token: None, timer_factory)
    sched.sync(TradingState.STOPPED)
    assert timer_factory.timers == []
    sched.sync(TradingState.LIVE)
    sched.sync(TradingState.LIVE)
    assert len(timer_factory.timers) == 1
    assert timer_factory.timers[0].started
    assert sched.state is SchedulerState.ACTIVE
    sched.sync(TradingState.STOPPED)
    assert timer_factory.timers[0].cancelled
    assert not sched.is_running()
    assert sched.state is SchedulerState.IDLE


def test_teardown_while_live_cancels(timer_factory):
    with PollingScheduler(300.0, lambda token: None, timer_factory) as sched:
        sched.sync(TradingState.LIVE)
    assert timer_factory.timers[0].cancelled
    assert not sched.is_running()


def test_pending_counts_as_not_live(timer_factory):
    sched = PollingScheduler(300.0, lambda token: None, timer_factory)
    sched.sync(TradingState.LIVE)
    sched.sync(TradingState.PENDING)
    assert timer_factory.live == []


def test_restart_after_stop_creates_fresh_timer(timer_factory):
    sched = PollingScheduler(300.0, lambda token: None, timer_factory)
    assert sched.start() is True
    assert sched.start() is False
    assert sched.stop() is True
    assert sched.stop() is False
    assert sched.start() is True
    assert len(timer_factory.timers) == 2
    assert len(timer_factory.live) == 1


def test_tick_receives_the_timer_token(timer_factory):
    seen = []
    sched = PollingScheduler(300.0, seen.append, timer_factory)
    sched.start()
    timer_factory.timers[0].fire()
    assert seen == [timer_factory.timers[0].token]
    sched.stop()
    assert seen[0].cancelled


def test_invalid_interval():
    with pytest.raises(ValueError):
        PollingScheduler(0, lambda token: None)


def test_repeating_timer_ticks_until_cancelled():
    ticks = []
    done = threading.Event()

    def tick(token):
        ticks.append(token)
        if len(ticks) >= 3:
            done.set()

    timer = RepeatingTimer(0.01, tick, CancelToken())
    timer.start()
    assert done.wait(2)
    timer.cancel()
    timer.join(2)
    assert not timer.is_alive()
    assert len(ticks) >= 3


def test_repeating_timer_survives_failing_tick():
    calls = []
    done = threading.Event()

    def tick(token):
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("poll failed")
        done.set()

    timer = RepeatingTimer(0.01, tick, CancelToken())
    timer.start()
    assert done.wait(2)
    timer.cancel()
    timer.join(2)
