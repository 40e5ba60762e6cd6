"""Unit tests for sync.tasks."""

import pytest

from trader_sync.sync.tasks import TaskKind, TaskTracker


def test_flag_set_during_and_cleared_after_success():
    tracker = TaskTracker()
    assert not tracker.is_busy(TaskKind.START)
    with tracker.track(TaskKind.START):
        assert tracker.is_busy(TaskKind.START)
        assert tracker.is_action_busy()
    assert not tracker.is_busy(TaskKind.START)


def test_flag_cleared_after_failure():
    tracker = TaskTracker()
    with pytest.raises(RuntimeError):
        with tracker.track(TaskKind.START):
            raise RuntimeError("boom")
    assert not tracker.is_busy(TaskKind.START)
    assert not tracker.any_busy()


def test_flags_are_independent():
    tracker = TaskTracker()
    with tracker.track(TaskKind.TRADE_HISTORY):
        assert tracker.busy_kinds() == {TaskKind.TRADE_HISTORY}
        assert not tracker.is_busy(TaskKind.PERFORMANCE)
        assert not tracker.is_action_busy()


def test_overlapping_same_kind():
    tracker = TaskTracker()
    with tracker.track(TaskKind.REFRESH):
        with tracker.track(TaskKind.REFRESH):
            pass
        assert tracker.is_busy(TaskKind.REFRESH)
    assert not tracker.is_busy(TaskKind.REFRESH)
