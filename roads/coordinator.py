"""
Purpose: Decide where the roads for a bounding box come from (the "glue" between API and Overpass).
What it does:
Resolves get_roads(box) in a strict order, each step tried only if the previous missed:
  1. exact hit on the rounded-box key
  2. containment hit: a cached box already covers the request (absolute margin)
  3. master cache: filter the borough-wide road list down to the box
  4. fetch from Overpass
Steps 3 and 4 memoize their result under the exact key.

Fetch failures are absorbed here: they are logged, counted in stats(), and the caller
gets an empty list. An empty list therefore means "no roads" OR "upstream degraded";
stats().fetch_failures is the signal that tells the two apart.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from geo.bounds import BOROUGH_BOUNDS, BoundingBox
from overpass.errors import UpstreamError

from .cache import RoadCache, RoadCacheEntry
from .models import Road
from .policy import RoadCachePolicy, default_cache_policy

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


class RoadFetcher(Protocol):
    """Anything that can fetch roads for a box (OverpassClient, test doubles)."""

    def fetch_roads(
        self,
        box: BoundingBox,
        major_roads_only: bool = False,
        *,
        anchor: Optional[LatLon] = None,
        anchor_radius_m: int = 1000,
    ) -> Sequence[Road]:
        ...


@dataclass(frozen=True)
class CoordinatorStats:
    exact_hits: int
    containment_hits: int
    master_hits: int
    fetches: int
    fetch_failures: int
    coalesced: int
    evictions: int
    cache_entries: int
    has_master_cache: bool


class _InFlight:
    """One outstanding fetch that later callers for the same key wait on."""

    def __init__(self):
        self.done = threading.Event()
        self.roads: List[Road] = []


class RoadCoordinator:
    """
    Owns the road cache, the optional master cache and the fetcher.
    Constructed once per process and injected where needed.
    """
    def __init__(
        self,
        fetcher: RoadFetcher,
        cache: Optional[RoadCache] = None,
        policy: Optional[RoadCachePolicy] = None,
    ):
        self.fetcher = fetcher
        self.policy = policy or default_cache_policy()
        self.cache = cache if cache is not None else RoadCache(max_entries=self.policy.max_entries)

        self._master_roads: Optional[Tuple[Road, ...]] = None
        self._in_flight: Dict[str, _InFlight] = {}
        self._lock = threading.Lock()

        #counters for stats()
        self._exact_hits = 0
        self._containment_hits = 0
        self._master_hits = 0
        self._fetches = 0
        self._fetch_failures = 0
        self._coalesced = 0

    # --- Public API ---

    def get_roads(self, box: BoundingBox) -> List[Road]:
        precision = self.policy.key_precision
        key = box.cache_key(precision)

        # 1. exact
        entry = self.cache.get(key)
        if entry is not None:
            self._bump("_exact_hits")
            logger.info("[CACHE HIT] Using cached road data for bounds %s", key)
            return list(entry.roads)

        # 2. containment
        entry = self.cache.find_containing(box, self.policy.containment_margin_deg)
        if entry is not None:
            self._bump("_containment_hits")
            logger.info("[CACHE OVERLAP] Bounds %s served from cached bounds %s", key, entry.key)
            return list(entry.roads)

        # 3. master
        master = self._master_roads
        if master is not None:
            roads = [road for road in master if road.touches(box)]
            self.cache.put(RoadCacheEntry.new(key, box.rounded(precision), roads))
            self._bump("_master_hits")
            logger.info("[MASTER CACHE] %d of %d roads fall inside %s", len(roads), len(master), key)
            return roads

        # 4. fetch
        return self._fetch_once(key, box)

    def load_master_cache(self, box: BoundingBox = BOROUGH_BOUNDS) -> int:
        """
        Fetch every named road in `box` once and keep it as the master cache.
        Returns the number of roads loaded (0 on failure, master cache left unset).
        """
        logger.info("[MASTER CACHE] Loading roads for %s", box.cache_key(self.policy.key_precision))
        roads = self._call_fetcher(box, major_roads_only=False)
        if roads is None:
            return 0
        self._master_roads = tuple(roads)
        logger.info("[MASTER CACHE] Loaded %d roads", len(roads))
        return len(roads)

    @property
    def has_master_cache(self) -> bool:
        return self._master_roads is not None

    def stats(self) -> CoordinatorStats:
        with self._lock:
            return CoordinatorStats(
                exact_hits=self._exact_hits,
                containment_hits=self._containment_hits,
                master_hits=self._master_hits,
                fetches=self._fetches,
                fetch_failures=self._fetch_failures,
                coalesced=self._coalesced,
                evictions=self.cache.evictions,
                cache_entries=len(self.cache),
                has_master_cache=self._master_roads is not None,
            )

    def clear(self) -> None:
        self.cache.clear()
        self._master_roads = None

    # --- Internal helpers ---

    def _bump(self, counter: str) -> None:
        with self._lock:
            setattr(self, counter, getattr(self, counter) + 1)

    def _fetch_once(self, key: str, box: BoundingBox) -> List[Road]:
        """
        Single-flight: the first caller for a key fetches, concurrent callers wait for it.
        """
        with self._lock:
            flight = self._in_flight.get(key)
            leader = flight is None
            if leader:
                flight = _InFlight()
                self._in_flight[key] = flight
            else:
                self._coalesced += 1

        if not leader:
            logger.info("[IN FLIGHT] Waiting on the running fetch for bounds %s", key)
            flight.done.wait()
            return list(flight.roads)

        try:
            flight.roads = self._fetch_and_store(key, box)
        finally:
            with self._lock:
                self._in_flight.pop(key, None)
            flight.done.set()
        return list(flight.roads)

    def _fetch_and_store(self, key: str, box: BoundingBox) -> List[Road]:
        query_box = box.widened(self.policy.fetch_margin_deg)

        # first load, or zoomed out: only major roads to keep the payload small
        major_roads_only = len(self.cache) == 0 or (
            query_box.lat_span > self.policy.major_roads_span_deg
            or query_box.lng_span > self.policy.major_roads_span_deg
        )

        logger.info(
            "[API REQUEST] Fetching %s for bounds %s",
            "only major roads" if major_roads_only else "all roads",
            key,
        )
        roads = self._call_fetcher(query_box, major_roads_only)
        if roads is None:
            return []

        self.cache.put(RoadCacheEntry.new(key, box.rounded(self.policy.key_precision), roads))
        return roads

    def _call_fetcher(self, box: BoundingBox, major_roads_only: bool) -> Optional[List[Road]]:
        """
        Run the fetcher, returning None (and counting a failure) when it fails.
        """
        self._bump("_fetches")
        try:
            roads = self.fetcher.fetch_roads(
                box,
                major_roads_only,
                anchor=self.policy.anchor,
                anchor_radius_m=self.policy.anchor_radius_m,
            )
        except UpstreamError as exc:
            self._bump("_fetch_failures")
            logger.error("Error fetching roads from Overpass API: %s", exc)
            return None
        except Exception:
            self._bump("_fetch_failures")
            logger.exception("Unexpected error fetching roads for %s", box.cache_key())
            return None
        return list(roads)
