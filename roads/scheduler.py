"""
Purpose: Timers as explicit task handles.
What it does:
- ScheduledTask: handle returned by call_later, cancellable, knows when it is due
- ManualScheduler: virtual clock, nothing runs until advance() is called (tests, simulations)
- ThreadingScheduler: wall clock backed by threading.Timer (live use)

Both expose the same two calls the throttle needs: now() and call_later(delay_s, fn).
"""

from __future__ import annotations

import heapq
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class ScheduledTask:
    def __init__(self, due_at: float, callback: Callback):
        self.due_at = due_at
        self.callback = callback
        self.cancelled = False
        self.done = False
        self._timer: Optional[threading.Timer] = None

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self) -> None:
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()

    def run(self) -> None:
        if not self.active:
            return
        self.done = True
        self.callback()


class ManualScheduler:
    """
    Deterministic scheduler driven by a virtual clock.

    Tasks run in due-time order, ties in scheduling order. Tasks scheduled by a
    callback run in the same advance() if they fall due before its target time.
    """
    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._seq = 0

    def now(self) -> float:
        return self._now

    def call_later(self, delay_s: float, callback: Callback) -> ScheduledTask:
        if delay_s < 0:
            raise ValueError(f"delay must be >= 0, got {delay_s}")
        task = ScheduledTask(self._now + delay_s, callback)
        self._seq += 1
        heapq.heappush(self._queue, (task.due_at, self._seq, task))
        return task

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, task in self._queue if task.active)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every task that falls due. Returns tasks run.
        """
        if seconds < 0:
            raise ValueError("time cannot go backwards")
        until = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= until:
            due_at, _, task = heapq.heappop(self._queue)
            self._now = max(self._now, due_at)
            if task.active:
                task.run()
                ran += 1
        self._now = until
        return ran

    def run_pending(self) -> int:
        """Run everything already due at the current time."""
        return self.advance(0.0)


class ThreadingScheduler:
    """
    Wall-clock scheduler. Callbacks run on timer threads; callers guard their own state.
    """
    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay_s: float, callback: Callback) -> ScheduledTask:
        task = ScheduledTask(self.now() + delay_s, callback)
        timer = threading.Timer(delay_s, self._run, args=(task,))
        timer.daemon = True
        task._timer = timer
        timer.start()
        return task

    @staticmethod
    def _run(task: ScheduledTask) -> None:
        try:
            task.run()
        except Exception:
            logger.exception("Scheduled task failed")
