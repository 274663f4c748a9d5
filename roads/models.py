"""
Purpose: Domain models for the Roads capability.
What it does:
- Defines RoadCategory (closed set of display categories)
- Defines Road (id, external_id, name, category, length_km, coordinates)

Rule: No Overpass calls, no caching logic. Models only.
length_km is never passed in by callers: Road.new derives it from the coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence, Tuple

from geo.geometry import path_length_km

LatLon = Tuple[float, float]

UNNAMED_ROAD = "Unnamed Road"


class RoadCategory(str, Enum):
    MOTORWAY = "Motorway"
    PRIMARY = "Primary"
    SECONDARY = "Secondary"
    TERTIARY = "Tertiary"
    RESIDENTIAL = "Residential"
    SERVICE = "Service"
    PATH = "Path"
    OTHER = "Other"


@dataclass(frozen=True)
class Road:
    """
    A single named highway segment as shown on the map.
    coordinates keep the source path order; it matters for length and rendering.
    """

    id: str
    external_id: str
    name: str
    category: RoadCategory
    length_km: float
    coordinates: Tuple[LatLon, ...]

    @classmethod
    def new(
        cls,
        way_id: int | str,
        coordinates: Sequence[LatLon],
        category: RoadCategory = RoadCategory.OTHER,
        name: str | None = None,
    ) -> Road:
        if not coordinates:
            raise ValueError(f"Road way/{way_id} needs at least one coordinate.")

        points = tuple((float(lat), float(lng)) for lat, lng in coordinates)
        return cls(
            id=f"road-{way_id}",
            external_id=f"way/{way_id}",
            name=name or UNNAMED_ROAD,
            category=category,
            length_km=path_length_km(points),
            coordinates=points,
        )

    def touches(self, box) -> bool:
        """True if at least one vertex of the road lies inside `box`."""
        return any(box.contains_point(lat, lng) for lat, lng in self.coordinates)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "externalId": self.external_id,
            "name": self.name,
            "category": self.category.value,
            "lengthKm": self.length_km,
            "coordinates": [list(point) for point in self.coordinates],
        }
