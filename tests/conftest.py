"""Shared fakes: transport, clock, timer factory, payload fixtures."""

import json
import threading
from pathlib import Path

import pytest

from trader_sync.core.errors import TransportError
from trader_sync.sync.scheduler import CancelToken
from trader_sync.transport.base import Transport

FIXTURES = Path(__file__).parent / "fixtures"


class FakeTransport(Transport):
    """
    Canned responses per path. A value may be a payload, an exception instance to
    raise, or a callable returning either.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def _respond(self, method, path, body=None):
        with self._lock:
            self.calls.append((method, path, body))
        if path not in self.responses:
            raise TransportError(404, "Not Found", f"no route {path}")
        value = self.responses[path]
        if callable(value):
            value = value()
        if isinstance(value, Exception):
            raise value
        return value

    def get_json(self, path):
        return self._respond("GET", path)

    def post_json(self, path, body=None):
        return self._respond("POST", path, body)

    def close(self):
        self.closed = True

    def count(self, method, path):
        return sum(1 for m, p, _ in self.calls if m == method and p == path)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeTimer:
    """Stands in for RepeatingTimer; ticks only when fire() is called."""

    def __init__(self, interval, callback, token: CancelToken):
        self.interval = interval
        self.callback = callback
        self.token = token
        self.started = False

    def start(self):
        self.started = True

    def cancel(self):
        self.token.cancel()

    @property
    def cancelled(self):
        return self.token.cancelled

    def fire(self):
        if not self.token.cancelled:
            self.callback(self.token)


class FakeTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, callback, token):
        timer = FakeTimer(interval, callback, token)
        self.timers.append(timer)
        return timer

    @property
    def live(self):
        return [t for t in self.timers if not t.cancelled]


@pytest.fixture
def load_payload():
    def _load(name):
        with open(FIXTURES / f"{name}.json", "r", encoding="utf-8") as f:
            return json.load(f)
    return _load


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def timer_factory():
    return FakeTimerFactory()
