"""
Purpose: Domain models for user highlights.
What it does:
- NewHighlight: what a caller submits (a road snapshot, no id / timestamp)
- Highlight: the stored record, id and created_at assigned by the store

Rule: same shape as a Road, but no link to the road cache.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

from roads.models import RoadCategory

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class NewHighlight:
    external_id: str
    name: str
    category: RoadCategory
    length_km: float
    coordinates: Tuple[LatLon, ...]


@dataclass(frozen=True)
class Highlight:
    id: int
    external_id: str
    name: str
    category: RoadCategory
    length_km: float
    coordinates: Tuple[LatLon, ...]
    created_at: datetime

    @classmethod
    def from_new(cls, highlight_id: int, new: NewHighlight, created_at: datetime) -> Highlight:
        return cls(
            id=highlight_id,
            external_id=new.external_id,
            name=new.name,
            category=new.category,
            length_km=new.length_km,
            coordinates=tuple(tuple(point) for point in new.coordinates),
            created_at=created_at,
        )
