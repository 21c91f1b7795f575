"""A single-threaded event loop with a ready queue and one-shot timers."""

from __future__ import annotations

import heapq
import itertools
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable

TaskCallback = Callable[[Any], object]

MAX_EVENTS = 64


@dataclass(order=True)
class _Timer:
    deadline: float
    sequence: int
    callback: TaskCallback = field(compare=False)
    data: Any = field(compare=False)


class EventLoop:
    """Runs queued tasks first, then waits for the next timer to expire.

    ``run`` returns once no task is queued and no timer is pending.
    """

    def __init__(self) -> None:
        self._ready: deque[tuple[TaskCallback, Any]] = deque()
        self._timers: list[_Timer] = []
        self._sequence = itertools.count()
        self._running = False

    @property
    def running(self) -> bool:
        """True while :meth:`run` is executing."""
        return self._running

    def schedule_task(self, callback: TaskCallback, data: Any = None) -> None:
        """Queue ``callback(data)`` to run on the next pass of the loop."""
        self._ready.append((callback, data))

    def schedule_timer(self, ms: int, callback: TaskCallback, data: Any = None) -> None:
        """Call ``callback(data)`` once, ``ms`` milliseconds from now.

        A zero delay leaves the timer disarmed, so it never fires.
        """
        if ms < 0:
            raise ValueError("timer delay must not be negative")
        if ms == 0:
            return
        deadline = time.monotonic() + ms / 1000
        heapq.heappush(self._timers, _Timer(deadline, next(self._sequence), callback, data))

    def _run_ready(self) -> None:
        while self._ready:
            callback, data = self._ready.popleft()
            callback(data)

    def _fire_due_timers(self) -> None:
        delay = self._timers[0].deadline - time.monotonic()
        if delay > 0:
            time.sleep(delay)
        now = time.monotonic()
        due = []
        while self._timers and self._timers[0].deadline <= now and len(due) < MAX_EVENTS:
            due.append(heapq.heappop(self._timers))
        for timer in due:
            timer.callback(timer.data)

    def run(self) -> None:
        """Run until there is nothing left to do."""
        if self._running:
            raise RuntimeError("event loop is already running")
        self._running = True
        try:
            while self._ready or self._timers:
                self._run_ready()
                if self._timers:
                    self._fire_due_timers()
        finally:
            self._running = False