"""Timers for heartbeat and reconnect. Injected so tests can drive a fake clock."""

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Union

from nukkad_bot.logging_config import get_logger

logger = get_logger("scheduler")

TimerCallback = Callable[[], Union[None, Awaitable[Any]]]


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle:
        """Run `callback` once after `delay` seconds."""
        pass

    @abstractmethod
    def call_every(self, interval: float, callback: TimerCallback) -> TimerHandle:
        """Run `callback` every `interval` seconds until cancelled."""
        pass


async def run_callback(callback: TimerCallback) -> None:
    """Invoke a timer callback; errors are logged and never escape."""
    try:
        result = callback()
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.error(f"Timer callback failed: {e}", exc_info=True)


class _TaskHandle(TimerHandle):
    def __init__(self, task: asyncio.Task):
        self._task = task
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        self._task.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioScheduler(Scheduler):
    """Timers as tasks on the running event loop."""

    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle:
        async def _later() -> None:
            await asyncio.sleep(delay)
            await run_callback(callback)

        return _TaskHandle(asyncio.get_running_loop().create_task(_later()))

    def call_every(self, interval: float, callback: TimerCallback) -> TimerHandle:
        async def _every() -> None:
            while True:
                await asyncio.sleep(interval)
                await run_callback(callback)

        return _TaskHandle(asyncio.get_running_loop().create_task(_every()))
