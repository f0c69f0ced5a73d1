# file: agentstudio/agentstudio/orchestrator/tick_scheduler.py
"""
Cancellable one-shot timers used by the orchestrator to schedule its next tick.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[None]]

class TickScheduler(ABC):
    """
    Schedules at most one pending tick callback at a time. Scheduling again
    replaces the pending callback.
    """

    @abstractmethod
    def schedule(self, delay_seconds: float, callback: TickCallback) -> None:
        raise NotImplementedError

    @abstractmethod
    def cancel(self) -> None:
        """Cancels the pending callback, if any. A callback already running is not interrupted."""
        raise NotImplementedError

    @property
    @abstractmethod
    def pending(self) -> bool:
        raise NotImplementedError


class AsyncioTickScheduler(TickScheduler):
    """Fires callbacks on the running asyncio loop after the requested delay."""

    def __init__(self):
        self._handle: Optional[asyncio.TimerHandle] = None
        self._running_task: Optional[asyncio.Task] = None

    def schedule(self, delay_seconds: float, callback: TickCallback) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(max(0.0, delay_seconds), self._fire, loop, callback)

    def _fire(self, loop: asyncio.AbstractEventLoop, callback: TickCallback) -> None:
        self._handle = None
        self._running_task = loop.create_task(callback())
        self._running_task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        if self._running_task is task:
            self._running_task = None
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Scheduled tick raised: {task.exception()}", exc_info=task.exception())

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None


class ManualTickScheduler(TickScheduler):
    """
    Records the next tick instead of timing it. Callers drive the loop with
    run_pending(), which makes tick sequences deterministic.
    """

    def __init__(self):
        self._callback: Optional[TickCallback] = None
        self.last_delay: Optional[float] = None
        self.scheduled_count = 0

    def schedule(self, delay_seconds: float, callback: TickCallback) -> None:
        self._callback = callback
        self.last_delay = delay_seconds
        self.scheduled_count += 1

    def cancel(self) -> None:
        self._callback = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    async def run_pending(self) -> bool:
        """Runs the pending callback once. Returns False if nothing was pending."""
        callback, self._callback = self._callback, None
        if callback is None:
            return False
        await callback()
        return True

    async def run_until_idle(self, max_ticks: int = 1000) -> int:
        """Keeps running pending ticks until none is scheduled. Returns the number run."""
        ran = 0
        while ran < max_ticks and await self.run_pending():
            ran += 1
        return ran
