"""
Purpose: Process-wide service wiring for the API.
What it does:
Builds the RoadCoordinator (Overpass client + cache + policy) and the HighlightStore
once, from Django settings, and hands the same instances to every view.
Tests swap them with override().
"""
import threading
from typing import Optional

from django.conf import settings

from highlights.store import HighlightStore
from overpass.client import OverpassClient
from roads.coordinator import RoadCoordinator
from roads.policy import RoadCachePolicy


def build_road_coordinator() -> RoadCoordinator:
    policy = RoadCachePolicy(max_entries=settings.ROADS_CACHE_MAX_ENTRIES)
    policy.validate()
    client = OverpassClient(base_url=settings.OVERPASS_URL, timeout=settings.OVERPASS_TIMEOUT_S)
    return RoadCoordinator(client, policy=policy)


class MappingServices:
    def __init__(self):
        self._coordinator: Optional[RoadCoordinator] = None
        self._highlight_store: Optional[HighlightStore] = None
        self._lock = threading.Lock()

    def road_coordinator(self) -> RoadCoordinator:
        with self._lock:
            if self._coordinator is None:
                self._coordinator = build_road_coordinator()
            return self._coordinator

    def highlight_store(self) -> HighlightStore:
        with self._lock:
            if self._highlight_store is None:
                self._highlight_store = HighlightStore()
            return self._highlight_store

    def override(
        self,
        coordinator: Optional[RoadCoordinator] = None,
        highlight_store: Optional[HighlightStore] = None,
    ) -> None:
        with self._lock:
            if coordinator is not None:
                self._coordinator = coordinator
            if highlight_store is not None:
                self._highlight_store = highlight_store

    def reset(self) -> None:
        with self._lock:
            self._coordinator = None
            self._highlight_store = None


services = MappingServices()
