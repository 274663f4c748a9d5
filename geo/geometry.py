"""
Purpose: Great-circle geometry for road segments.
What it does:
- distance_km: Haversine distance between two (lat, lon) points
- path_length_km: length of a polyline as the sum of its consecutive hops

Rule: pure functions, no I/O. Road.length_km is always derived from here.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

LatLon = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance in kilometres using the Haversine formula.

    Symmetric in its two points and exactly 0.0 for identical points.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def path_length_km(coordinates: Sequence[LatLon]) -> float:
    """
    Sum of distance_km over consecutive coordinate pairs.
    0.0 for empty or single-point paths.
    """
    length = 0.0
    for (lat1, lon1), (lat2, lon2) in zip(coordinates, coordinates[1:]):
        length += distance_km(lat1, lon1, lat2, lon2)
    return length
