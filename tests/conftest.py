import random
from datetime import datetime, timezone
from typing import Optional
from unittest.mock import AsyncMock, Mock

import pytest

from nukkad_bot.catalog import load_catalog
from nukkad_bot.services.auth_state import AuthStateStore
from nukkad_bot.services.replies import ReplyBuilder
from nukkad_bot.services.scheduler import Scheduler, TimerHandle, run_callback
from nukkad_bot.services.transport import Transport

# 11:30 in Asia/Kolkata, inside business hours
OPEN_HOURS_NOW = datetime(2026, 1, 15, 6, 0, tzinfo=timezone.utc)


class FakeTimer(TimerHandle):
    def __init__(self, due: float, callback, interval: Optional[float] = None):
        self.due = due
        self.callback = callback
        self.interval = interval
        self.fired = False
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class FakeScheduler(Scheduler):
    """Manual clock. `advance` fires due timers in order."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay, callback):
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def call_every(self, interval, callback):
        timer = FakeTimer(self.now + interval, callback, interval=interval)
        self.timers.append(timer)
        return timer

    def pending(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if not timer.cancelled and not timer.fired]

    def pending_one_shots(self) -> list[FakeTimer]:
        return [timer for timer in self.pending() if timer.interval is None]

    async def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [timer for timer in self.pending() if timer.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now = timer.due
            if timer.interval is None:
                timer.fired = True
            else:
                timer.due += timer.interval
            await run_callback(timer.callback)
        self.now = target


@pytest.fixture
def catalog():
    return load_catalog()


@pytest.fixture
def replies(catalog):
    return ReplyBuilder(catalog, rng=random.Random(7), clock=lambda: OPEN_HOURS_NOW)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def transport():
    """Mocked WhatsApp transport; every method is an AsyncMock."""
    return AsyncMock(spec=Transport)


@pytest.fixture
def auth_state():
    store = Mock(spec=AuthStateStore)
    store.load.return_value = {"me": {"id": "919999999999@s.whatsapp.net"}}
    return store
