"""
chronomaya.engines.cache
------------------------
Bounded LRU cache of CalendarSnapshot keyed by day offset.

An LRU read moves the entry to the most-recent position, so every access is
a mutation of the recency order. One lock per instance serializes exactly
that map access and nothing else; callers compute snapshots outside it.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from cachetools import LRUCache

from ..core.errors import ConfigurationError
from ..core.types import CalendarSnapshot

logger = logging.getLogger(__name__)


class CalendarCache:
    def __init__(self, capacity: int) -> None:
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 1:
            raise ConfigurationError(f"CalendarCache capacity must be a positive int, got {capacity!r}")
        self._capacity = capacity
        self._lru: LRUCache = LRUCache(maxsize=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, day_offset: int) -> Optional[CalendarSnapshot]:
        """Cached snapshot for day_offset, marked most recently used; None on miss."""
        with self._lock:
            snap = self._lru.get(day_offset)
        return snap.clone() if snap is not None else None

    def put(self, day_offset: int, snapshot: CalendarSnapshot) -> None:
        """Insert or overwrite; at capacity the least recently used entry goes first."""
        with self._lock:
            evicted = None
            if day_offset not in self._lru and len(self._lru) >= self._capacity:
                evicted, _ = self._lru.popitem()
            self._lru[day_offset] = snapshot
        if evicted is not None:
            logger.debug("Evicted day offset %d from calendar cache", evicted)

    def __contains__(self, day_offset: object) -> bool:
        # Membership check only; recency is left untouched.
        with self._lock:
            return day_offset in self._lru

    def __len__(self) -> int:
        with self._lock:
            return len(self._lru)

    def clear(self) -> None:
        with self._lock:
            self._lru.clear()
