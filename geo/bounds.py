"""
Purpose: Bounding box value type and the box arithmetic used by caching/throttling.
What it does:
- BoundingBox (south_lat, west_lng, north_lat, east_lng) with its ordering invariant
- rounding + cache key generation (fixed precision so near-identical viewports share a key)
- expand_bounds: grow a box by a buffer percentage of its own span
- is_within_bounds: heuristic containment with a relative tolerance (viewport throttle)
- contains_with_margin: absolute-margin containment (cache coordinator)

Rule: no caching state here, just values and predicates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

LatLon = Tuple[float, float]


class InvalidArgument(ValueError):
    """Raised when a bounds helper gets an argument outside its domain."""
    pass


@dataclass(frozen=True)
class BoundingBox:
    """
    Rectangular lat/lng region.
    Used both as an Overpass query parameter and (after rounding) as a cache key.
    """

    south_lat: float
    west_lng: float
    north_lat: float
    east_lng: float

    def __post_init__(self):
        if self.south_lat > self.north_lat:
            raise ValueError(f"south_lat {self.south_lat} is north of north_lat {self.north_lat}")
        if self.west_lng > self.east_lng:
            raise ValueError(f"west_lng {self.west_lng} is east of east_lng {self.east_lng}")

    @classmethod
    def from_corners(cls, south_west: LatLon, north_east: LatLon) -> BoundingBox:
        return cls(south_west[0], south_west[1], north_east[0], north_east[1])

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[LatLon], padding: float = 0.0) -> BoundingBox:
        """
        Tight box around a coordinate sequence, padded by an absolute number of degrees.
        """
        points = list(coordinates)
        if not points:
            raise ValueError("Cannot build a bounding box from zero coordinates.")
        lats = [lat for lat, _ in points]
        lngs = [lng for _, lng in points]
        return cls(
            min(lats) - padding,
            min(lngs) - padding,
            max(lats) + padding,
            max(lngs) + padding,
        )

    @property
    def lat_span(self) -> float:
        return self.north_lat - self.south_lat

    @property
    def lng_span(self) -> float:
        return self.east_lng - self.west_lng

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.south_lat, self.west_lng, self.north_lat, self.east_lng)

    def rounded(self, precision: int = 4) -> BoundingBox:
        # 4 decimal places is roughly 11m
        return BoundingBox(
            round(self.south_lat, precision),
            round(self.west_lng, precision),
            round(self.north_lat, precision),
            round(self.east_lng, precision),
        )

    def cache_key(self, precision: int = 4) -> str:
        return ",".join(f"{edge:.{precision}f}" for edge in self.as_tuple())

    def contains_point(self, lat: float, lng: float) -> bool:
        return self.south_lat <= lat <= self.north_lat and self.west_lng <= lng <= self.east_lng

    def widened(self, degrees: float) -> BoundingBox:
        """Box grown by an absolute number of degrees on every side."""
        return BoundingBox(
            self.south_lat - degrees,
            self.west_lng - degrees,
            self.north_lat + degrees,
            self.east_lng + degrees,
        )


# Wandsworth borough, London
BOROUGH_BOUNDS = BoundingBox(51.4232, -0.2392, 51.4910, -0.1462)
BOROUGH_CENTER: LatLon = (51.4571, -0.1927)


def expand_bounds(box: BoundingBox, percent: float) -> BoundingBox:
    """
    Grow `box` symmetrically by `percent` of each dimension's span.

    percent == 0 returns an equal box. Negative percentages raise InvalidArgument.
    """
    if percent < 0:
        raise InvalidArgument(f"buffer percent must be >= 0, got {percent}")
    if percent == 0:
        return box

    lat_buffer = box.lat_span * percent / 100
    lng_buffer = box.lng_span * percent / 100
    return BoundingBox(
        box.south_lat - lat_buffer,
        box.west_lng - lng_buffer,
        box.north_lat + lat_buffer,
        box.east_lng + lng_buffer,
    )


def is_within_bounds(inner: BoundingBox, outer: BoundingBox, tolerance: float = 0.8) -> bool:
    """
    Heuristic containment test used to skip viewport queries.

    Each edge of `outer` is relaxed outward by slack = |edge| * (1 - tolerance),
    i.e. a fraction of the edge's own coordinate magnitude, not of the box span:

        inner.south_lat >= outer.south_lat - |outer.south_lat| * (1 - tolerance)
        inner.west_lng  >= outer.west_lng  - |outer.west_lng|  * (1 - tolerance)
        inner.north_lat <= outer.north_lat + |outer.north_lat| * (1 - tolerance)
        inner.east_lng  <= outer.east_lng  + |outer.east_lng|  * (1 - tolerance)

    Near the prime meridian the longitude slack is tiny; at 51N the latitude slack
    is ~10 degrees with the default tolerance.
    """
    slack = 1 - tolerance
    return (
        inner.south_lat >= outer.south_lat - abs(outer.south_lat * slack)
        and inner.west_lng >= outer.west_lng - abs(outer.west_lng * slack)
        and inner.north_lat <= outer.north_lat + abs(outer.north_lat * slack)
        and inner.east_lng <= outer.east_lng + abs(outer.east_lng * slack)
    )


def contains_with_margin(inner: BoundingBox, outer: BoundingBox, margin: float) -> bool:
    """True if `inner` fits inside `outer` grown by an absolute `margin` in degrees."""
    return (
        inner.south_lat >= outer.south_lat - margin
        and inner.west_lng >= outer.west_lng - margin
        and inner.north_lat <= outer.north_lat + margin
        and inner.east_lng <= outer.east_lng + margin
    )


def intersects(a: BoundingBox, b: BoundingBox) -> bool:
    return not (
        a.north_lat < b.south_lat
        or a.south_lat > b.north_lat
        or a.east_lng < b.west_lng
        or a.west_lng > b.east_lng
    )
