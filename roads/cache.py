"""
Purpose: In-memory road cache keyed by rounded bounding box.
What it does:
- Owns RoadCacheEntry objects (key, bounds, roads); entries are replaced, never mutated
- Exact-key lookup (LRU touch on hit)
- Containment lookup: first cached box that covers a request within a margin
- Capacity bound with least-recently-used eviction

Rule: cache owns storage and eviction. Which layer to ask (exact/containment/master/fetch)
is decided by the coordinator.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from geo.bounds import BoundingBox, contains_with_margin

from .models import Road


@dataclass(frozen=True)
class RoadCacheEntry:
    key: str
    bounds: BoundingBox
    roads: Tuple[Road, ...]

    @classmethod
    def new(cls, key: str, bounds: BoundingBox, roads: Sequence[Road]) -> RoadCacheEntry:
        return cls(key=key, bounds=bounds, roads=tuple(roads))


class RoadCache:
    """
    Bounded LRU map of cache key -> RoadCacheEntry.
    """
    def __init__(self, max_entries: int = 256):
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, RoadCacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self.evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries.keys())

    def get(self, key: str) -> Optional[RoadCacheEntry]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
            return entry

    def put(self, entry: RoadCacheEntry) -> None:
        """
        Store (or wholesale replace) an entry, evicting the oldest when over capacity.
        """
        with self._lock:
            self._entries[entry.key] = entry
            self._entries.move_to_end(entry.key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
                self.evictions += 1

    def find_containing(self, box: BoundingBox, margin: float) -> Optional[RoadCacheEntry]:
        """
        First entry (oldest first) whose bounds cover `box` within `margin` degrees.
        """
        with self._lock:
            for key, entry in self._entries.items():
                if contains_with_margin(box, entry.bounds, margin):
                    self._entries.move_to_end(key)
                    return entry
        return None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
