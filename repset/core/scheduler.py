"""Cancellable one-shot callbacks for the timer engine.

``AsyncioScheduler`` runs on a live event loop. ``ManualScheduler`` keeps a
virtual clock that only moves when ``advance`` is called, which makes whole
workouts replayable instantly.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Protocol


class SchedulerError(RuntimeError):
    """Raised when a callback cannot be scheduled."""


class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> Handle: ...


class AsyncioScheduler:
    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as exc:
            raise SchedulerError("No running event loop") from exc

    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._resolve_loop()
        if loop.is_closed():
            raise SchedulerError("Event loop is closed")
        return loop.call_later(max(0.0, delay_sec), callback)


@dataclass(order=True)
class _ManualEntry:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[_ManualEntry] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry.cancelled)

    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> _ManualEntry:
        entry = _ManualEntry(
            due=self._now + max(0.0, delay_sec),
            seq=next(self._seq),
            callback=callback,
        )
        heapq.heappush(self._queue, entry)
        return entry

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every callback that falls due."""
        target = self._now + seconds
        while self._queue and self._queue[0].due <= target:
            entry = heapq.heappop(self._queue)
            if entry.cancelled:
                continue
            self._now = entry.due
            entry.callback()
        self._now = target

    def run_until_idle(self, limit_sec: float = 24 * 3600) -> None:
        """Run callbacks until nothing is scheduled or ``limit_sec`` passes."""
        deadline = self._now + limit_sec
        while self._queue and self._now <= deadline:
            entry = heapq.heappop(self._queue)
            if entry.cancelled:
                continue
            if entry.due > deadline:
                heapq.heappush(self._queue, entry)
                break
            self._now = entry.due
            entry.callback()
