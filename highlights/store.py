"""
Purpose: In-memory CRUD for highlight records.
What it does:
- save: assigns the next sequential id (starts at 1, never reused) and a UTC timestamp
- list / get_by_id: read back
- delete_by_id: True if something was removed, False otherwise (never raises)

No update operation. Everything is lost on process restart.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .models import Highlight, NewHighlight


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HighlightStore:
    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or _utc_now
        self._highlights: Dict[int, Highlight] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._highlights)

    def save(self, new: NewHighlight) -> Highlight:
        with self._lock:
            highlight = Highlight.from_new(self._next_id, new, created_at=self._clock())
            self._next_id += 1
            self._highlights[highlight.id] = highlight
            return highlight

    def list(self) -> List[Highlight]:
        with self._lock:
            return list(self._highlights.values())

    def get_by_id(self, highlight_id: int) -> Optional[Highlight]:
        with self._lock:
            return self._highlights.get(highlight_id)

    def delete_by_id(self, highlight_id: int) -> bool:
        with self._lock:
            return self._highlights.pop(highlight_id, None) is not None
