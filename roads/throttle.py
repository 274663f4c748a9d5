"""
Purpose: Throttle raw viewport bounds (fired on every pan/zoom) before they reach the coordinator.
What it does:
- Skips bounds already covered by the last applied (expanded) query box
- Debounces the rest: a newer bounds value cancels and replaces a pending apply
- Rate limits applies to max_queries_per_window per rolling window_s seconds
- On apply: expands the bounds by buffer_percent and hands the box to on_apply

State machine per viewport session:

    idle --update_bounds--> pending --timer--> applied
      ^        |  (contained: skip)     |
      |        +--- cancel/replace -----+

Rule: throttle owns timing only. It never looks at roads or caches.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Deque, Optional

from geo.bounds import BoundingBox, expand_bounds, is_within_bounds

from .policy import ThrottlePolicy, default_throttle_policy
from .scheduler import ScheduledTask

logger = logging.getLogger(__name__)

ApplyCallback = Callable[[BoundingBox], None]


class ViewportThrottle:
    def __init__(self, on_apply: ApplyCallback, scheduler, policy: Optional[ThrottlePolicy] = None):
        self.on_apply = on_apply
        self.scheduler = scheduler
        self.policy = policy or default_throttle_policy()

        self._lock = threading.RLock()
        self._pending: Optional[ScheduledTask] = None
        self._seen_bounds = False

        self.active_bounds: Optional[BoundingBox] = None
        self.last_applied_bounds: Optional[BoundingBox] = None

        # timestamps of applies still inside the rolling window, oldest first
        self._recent_applies: Deque[float] = deque()
        # matching decay timers, one per recent apply
        self._decay_tasks: Deque[ScheduledTask] = deque()

        self.applied_count = 0
        self.skipped_count = 0

    # --- Read-only state ---

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None and self._pending.active

    @property
    def window_count(self) -> int:
        with self._lock:
            return len(self._recent_applies)

    # --- Public API ---

    def update_bounds(self, bounds: Optional[BoundingBox]) -> Optional[ScheduledTask]:
        """
        Feed one raw bounds value. Returns the scheduled apply, or None if nothing was scheduled.
        """
        with self._lock:
            # last write wins: whatever was pending is superseded
            self._cancel_pending()

            if bounds is None:
                return None

            if self.last_applied_bounds is not None and is_within_bounds(
                bounds, self.last_applied_bounds, self.policy.containment_tolerance
            ):
                self.skipped_count += 1
                logger.debug("Skipping query - bounds within last queried bounds")
                return None

            first_bounds = not self._seen_bounds
            self._seen_bounds = True
            delay = self.policy.initial_debounce_s if first_bounds else self.policy.debounce_s

            if len(self._recent_applies) >= self.policy.max_queries_per_window:
                elapsed = self.scheduler.now() - self._recent_applies[0]
                delay = max(0.0, self.policy.window_s - elapsed) + self.policy.debounce_s
                logger.info("Rate limiting in effect, extending debounce to %.0fms", delay * 1000)

            self._pending = self.scheduler.call_later(delay, lambda: self._apply(bounds))
            return self._pending

    def close(self) -> None:
        with self._lock:
            self._cancel_pending()
            while self._decay_tasks:
                self._decay_tasks.popleft().cancel()
            self._recent_applies.clear()

    # --- Internal helpers ---

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _apply(self, bounds: BoundingBox) -> None:
        with self._lock:
            expanded = expand_bounds(bounds, self.policy.buffer_percent)
            self.active_bounds = expanded
            self.last_applied_bounds = expanded
            self._pending = None

            self._recent_applies.append(self.scheduler.now())
            self.applied_count += 1
            # each apply leaves the window exactly window_s later
            self._decay_tasks.append(self.scheduler.call_later(self.policy.window_s, self._decay))

        self.on_apply(expanded)

    def _decay(self) -> None:
        with self._lock:
            if self._recent_applies:
                self._recent_applies.popleft()
            if self._decay_tasks:
                self._decay_tasks.popleft()
