"""
Geo utilities package.

Public API:
- Geometry: distance_km, path_length_km
- Bounds: BoundingBox, expand_bounds, is_within_bounds, contains_with_margin
- Borough constants: BOROUGH_BOUNDS, BOROUGH_CENTER

No network calls, no caching. Pure functions and value types only.
"""
from .geometry import EARTH_RADIUS_KM, distance_km, path_length_km
from .bounds import (
    BOROUGH_BOUNDS,
    BOROUGH_CENTER,
    BoundingBox,
    InvalidArgument,
    contains_with_margin,
    expand_bounds,
    intersects,
    is_within_bounds,
)

__all__ = [
    "EARTH_RADIUS_KM",
    "distance_km",
    "path_length_km",
    "BOROUGH_BOUNDS",
    "BOROUGH_CENTER",
    "BoundingBox",
    "InvalidArgument",
    "contains_with_margin",
    "expand_bounds",
    "intersects",
    "is_within_bounds",
]
