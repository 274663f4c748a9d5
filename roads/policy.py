"""
Purpose: Central configuration for road caching and viewport throttling.
What it does:

Stores all tunable thresholds/caps:

KEY_PRECISION = 4 (decimal places in the cache key, ~11m)

CONTAINMENT_MARGIN_DEG = 0.01

DEBOUNCE = 500ms, MAX 3 QUERIES / 10s, BUFFER = 100%

Rule: No logic here, just parameters. Tune here without touching the layers that use them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from geo.bounds import BOROUGH_CENTER

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class RoadCachePolicy:
    """
    Configuration for the cache/coordinator layer.
    """

    # --- Cache keys ---
    # Boxes are rounded to this many decimal places before keying.
    key_precision: int = 4

    # --- Containment reuse ---
    # A cached box still serves a request that pokes out of it by up to this many degrees.
    containment_margin_deg: float = 0.01

    # --- Fetch shaping ---
    # Query box is widened by this on every side before it goes to Overpass.
    fetch_margin_deg: float = 0.01
    # Above this span (either dimension) only major roads are requested.
    major_roads_span_deg: float = 0.05

    # Arterials around this point are included in every query (None disables).
    anchor: Optional[LatLon] = BOROUGH_CENTER
    anchor_radius_m: int = 1000

    # --- Capacity ---
    # Exact-key entries kept before the least recently used one is evicted.
    max_entries: int = 256

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.key_precision < 0:
            raise ValueError("key_precision must be >= 0")

        if self.containment_margin_deg < 0 or self.fetch_margin_deg < 0:
            raise ValueError("margins must be >= 0")

        if self.major_roads_span_deg <= 0:
            raise ValueError("major_roads_span_deg must be > 0")

        if self.anchor_radius_m <= 0:
            raise ValueError("anchor_radius_m must be > 0")

        if self.max_entries < 1:
            raise ValueError("max_entries must be >= 1")


@dataclass(frozen=True)
class ThrottlePolicy:
    """
    Configuration for the viewport throttle (debounce + rolling rate limit).
    """

    # --- Debounce ---
    debounce_s: float = 0.5
    # First bounds of a session apply immediately to avoid startup lag.
    initial_debounce_s: float = 0.0

    # --- Query box ---
    # Applied bounds are expanded by this percent of their span for better cache reuse.
    buffer_percent: float = 100.0
    # New bounds inside the last expanded box (with this tolerance) are ignored.
    containment_tolerance: float = 0.8

    # --- Rate limit ---
    max_queries_per_window: int = 3
    window_s: float = 10.0

    def validate(self) -> None:
        if self.debounce_s < 0 or self.initial_debounce_s < 0:
            raise ValueError("debounce delays must be >= 0")

        if self.buffer_percent < 0:
            raise ValueError("buffer_percent must be >= 0")

        if not 0 <= self.containment_tolerance <= 1:
            raise ValueError("containment_tolerance must be within [0, 1]")

        if self.max_queries_per_window < 1:
            raise ValueError("max_queries_per_window must be >= 1")

        if self.window_s <= 0:
            raise ValueError("window_s must be > 0")


def default_cache_policy() -> RoadCachePolicy:
    """
    Convenience factory for the default cache policy.
    """
    p = RoadCachePolicy()
    p.validate()
    return p


def default_throttle_policy() -> ThrottlePolicy:
    p = ThrottlePolicy()
    p.validate()
    return p
