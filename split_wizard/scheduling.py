"""
Clocks, schedulers and debouncing

DESIGN DECISION: The wizard has exactly two time-based behaviors - the
transition cooldown and the amount-input debounce. Both go through an
injected Clock/Scheduler so tests advance time explicitly instead of sleeping.

Everything here runs callbacks on the caller's thread; there is no
background thread anywhere in the wizard.
"""

import asyncio
import heapq
import itertools
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional


class Clock(ABC):
    """Monotonic time source, in seconds."""

    @abstractmethod
    def now(self) -> float:
        pass


class MonotonicClock(Clock):
    def now(self) -> float:
        return time.monotonic()


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        pass


class Scheduler(Clock):
    """A clock that can also run a callback later."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """
        Run callback once, delay seconds from now.

        Returns:
            A handle whose cancel() prevents the callback if it has not run yet
        """
        pass


class _ManualTimer(TimerHandle):
    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler for tests and for hosts that drive time themselves.

    Time only moves when advance() is called; due callbacks run in deadline
    order (ties in scheduling order) before advance() returns.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, _ManualTimer]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = _ManualTimer(callback)
        deadline = self._now + max(0.0, delay)
        heapq.heappush(self._queue, (deadline, next(self._counter), timer))
        return timer

    def advance(self, seconds: float) -> None:
        """Move time forward and run every callback that falls due."""
        target = self._now + max(0.0, seconds)
        while self._queue and self._queue[0][0] <= target:
            deadline, _, timer = heapq.heappop(self._queue)
            self._now = deadline
            if not timer.cancelled:
                timer.callback()
        self._now = target

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop (the loop's own clock)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        # asyncio.TimerHandle already provides cancel()
        return self._loop.call_later(delay, callback)


class Debouncer:
    """
    Coalesces bursts of triggers into one callback after a quiet period.

    Without a scheduler, every trigger fires the callback immediately.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        delay: float,
        scheduler: Optional[Scheduler] = None,
    ):
        self._callback = callback
        self._delay = delay
        self._scheduler = scheduler
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        if self._scheduler is None or self._delay <= 0:
            self._callback()
            return
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self._scheduler.call_later(self._delay, self._fire)

    def flush(self) -> None:
        """Fire now if a call is pending."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()
