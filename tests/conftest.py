"""
Shared fixtures for rotlog tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

import rotlog
from rotlog import rotating_log


class FakeClock:
    """Controllable clock passed to RotatingLog(clock=...)."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class FatalExit(Exception):
    """Raised in place of process termination."""

    def __init__(self, code):
        super().__init__(code)
        self.code = code


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 15, 10, 30, 5, tzinfo=timezone.utc))


@pytest.fixture
def no_exit(monkeypatch):
    """Replace process termination with a FatalExit exception."""
    calls = []

    def fake_terminate(code=rotating_log.FATAL_EXIT_CODE):
        calls.append(code)
        raise FatalExit(code)

    monkeypatch.setattr(rotating_log, 'terminate', fake_terminate)
    return calls


@pytest.fixture(autouse=True)
def reset_registry():
    yield
    rotlog.close()


def read_lines(path):
    with open(path, encoding='utf-8') as f:
        return f.read().splitlines()
