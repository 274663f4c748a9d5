"""
Purpose: One user's map viewport, end to end.
What it does:
Wires raw viewport bounds -> ViewportThrottle -> RoadCoordinator and keeps the
latest road list for rendering. While a new query is pending the previous
roads stay visible.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from geo.bounds import BOROUGH_BOUNDS, BoundingBox

from .coordinator import RoadCoordinator
from .models import Road
from .policy import ThrottlePolicy
from .throttle import ViewportThrottle

logger = logging.getLogger(__name__)

RoadsCallback = Callable[[BoundingBox, List[Road]], None]


class ViewportSession:
    def __init__(
        self,
        coordinator: RoadCoordinator,
        scheduler,
        policy: Optional[ThrottlePolicy] = None,
        on_roads: Optional[RoadsCallback] = None,
    ):
        self.coordinator = coordinator
        self.on_roads = on_roads
        self.throttle = ViewportThrottle(self._resolve, scheduler, policy)

        self.roads: List[Road] = []
        self.query_bounds: Optional[BoundingBox] = None
        self.query_count = 0

    def move(self, bounds: Optional[BoundingBox]) -> None:
        """Feed the bounds the map reports after a pan or zoom."""
        self.throttle.update_bounds(bounds)

    def reset_view(self) -> None:
        self.move(BOROUGH_BOUNDS)

    def close(self) -> None:
        self.throttle.close()

    def _resolve(self, expanded: BoundingBox) -> None:
        self.query_bounds = expanded
        self.query_count += 1
        self.roads = self.coordinator.get_roads(expanded)
        logger.info("Received %d roads for bounds %s", len(self.roads), expanded.cache_key())
        if self.on_roads is not None:
            self.on_roads(expanded, self.roads)
