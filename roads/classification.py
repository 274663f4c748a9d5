"""
Purpose: Map raw OSM `highway` tags onto the closed set of display categories.
What it does:
- classify(raw) -> RoadCategory, total (unknown or missing tags become Other)
- MAJOR_HIGHWAY_TYPES: the tags requested when only major roads are fetched

Matching is case-sensitive against the OSM vocabulary ("primary", not "Primary").
"""

from __future__ import annotations

from typing import Dict, Optional

from .models import RoadCategory

MAJOR_HIGHWAY_TYPES = ("motorway", "trunk", "primary", "secondary", "tertiary")

# arterials always pulled in around the borough centre
ARTERIAL_HIGHWAY_TYPES = ("motorway", "trunk", "primary", "secondary")

_HIGHWAY_CATEGORIES: Dict[str, RoadCategory] = {
    "motorway": RoadCategory.MOTORWAY,
    "trunk": RoadCategory.MOTORWAY,
    "primary": RoadCategory.PRIMARY,
    "secondary": RoadCategory.SECONDARY,
    "tertiary": RoadCategory.TERTIARY,
    "residential": RoadCategory.RESIDENTIAL,
    "service": RoadCategory.SERVICE,
    "footway": RoadCategory.PATH,
    "path": RoadCategory.PATH,
    "cycleway": RoadCategory.PATH,
}


def classify(raw: Optional[str]) -> RoadCategory:
    if not isinstance(raw, str):
        return RoadCategory.OTHER
    return _HIGHWAY_CATEGORIES.get(raw, RoadCategory.OTHER)
