"""
Purpose: The user's current road selection and its aggregate statistics.
What it does:
- toggle a road in/out of the selection (click on the map)
- summary: how many roads, total length, length per category
- focus_bounds: box around the most recently touched road
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from geo.bounds import BoundingBox

from .models import Road, RoadCategory


@dataclass(frozen=True)
class SelectionSummary:
    count: int
    total_length_km: float
    by_category: Dict[RoadCategory, float] = field(default_factory=dict)


class RoadSelection:
    def __init__(self):
        self._selected: Dict[str, Road] = {}
        self.last_touched: Optional[Road] = None

    def __len__(self) -> int:
        return len(self._selected)

    def toggle(self, road: Road) -> bool:
        """
        Select the road if it was not selected, otherwise drop it.
        Returns True when the road is selected afterwards.
        """
        self.last_touched = road
        if road.id in self._selected:
            del self._selected[road.id]
            return False
        self._selected[road.id] = road
        return True

    def is_selected(self, road_id: str) -> bool:
        return road_id in self._selected

    def roads(self) -> List[Road]:
        return list(self._selected.values())

    def clear(self) -> None:
        self._selected.clear()
        self.last_touched = None

    def summary(self) -> SelectionSummary:
        by_category: Dict[RoadCategory, float] = {}
        for road in self._selected.values():
            by_category[road.category] = by_category.get(road.category, 0.0) + road.length_km
        return SelectionSummary(
            count=len(self._selected),
            total_length_km=sum(road.length_km for road in self._selected.values()),
            by_category=by_category,
        )

    def focus_bounds(self, padding: float = 0.005) -> Optional[BoundingBox]:
        if self.last_touched is None:
            return None
        return BoundingBox.from_coordinates(self.last_touched.coordinates, padding=padding)
