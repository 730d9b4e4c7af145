"""
chronomaya.engines.metrics
--------------------------
Process-wide counters shared by the calculator and the asset cache.

Increments never take a lock: each thread owns a private cell that only it
writes, and readers sum all cells. When a thread exits its cell is folded
into a base total, so storage stays bounded by the number of live threads
and every counter is monotonic for the lifetime of the process.
"""

from __future__ import annotations

import itertools
import threading
import time
import weakref
from contextlib import contextmanager
from typing import Dict, Iterator, List

from ..core.types import MetricsReport


class _Cell:
    """Per-thread holder; dropped by threading.local when its thread exits."""
    __slots__ = ("box", "__weakref__")

    def __init__(self, box: List[int]) -> None:
        self.box = box


class ShardedCounter:
    __slots__ = ("_local", "_cells", "_base", "_lock", "_ids")

    def __init__(self) -> None:
        self._local = threading.local()
        self._cells: Dict[int, List[int]] = {}
        self._base = 0
        # Taken on reads, on a thread's first add and when its cell is folded into _base.
        self._lock = threading.RLock()
        self._ids = itertools.count()

    def add(self, n: int = 1) -> None:
        if n < 0:
            raise ValueError("Counters only increase")
        cell = getattr(self._local, "cell", None)
        if cell is None:
            cell = _Cell([0])
            cell_id = next(self._ids)
            with self._lock:
                self._cells[cell_id] = cell.box
            weakref.finalize(cell, self._retire, cell_id, cell.box).atexit = False
            self._local.cell = cell
        cell.box[0] += n

    def _retire(self, cell_id: int, box: List[int]) -> None:
        with self._lock:
            self._base += box[0]
            del self._cells[cell_id]

    @property
    def live_cells(self) -> int:
        with self._lock:
            return len(self._cells)

    @property
    def value(self) -> int:
        with self._lock:
            return self._base + sum(b[0] for b in tuple(self._cells.values()))


def _micros(seconds: float) -> int:
    return int(seconds * 1_000_000)


class Metrics:
    def __init__(self) -> None:
        self._calculation_time = ShardedCounter()
        self._cache_hits = ShardedCounter()
        self._cache_misses = ShardedCounter()
        self._asset_load_time = ShardedCounter()
        self._asset_loads = ShardedCounter()
        self._asset_failures = ShardedCounter()

    def record_calculation(self, seconds: float) -> None:
        self._calculation_time.add(_micros(seconds))

    def record_cache_hit(self) -> None:
        self._cache_hits.add()

    def record_cache_miss(self) -> None:
        self._cache_misses.add()

    def record_asset_load(self, seconds: float, *, ok: bool = True) -> None:
        self._asset_load_time.add(_micros(seconds))
        (self._asset_loads if ok else self._asset_failures).add()

    @contextmanager
    def time_calculation(self) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.record_calculation(time.perf_counter() - t0)

    @property
    def cache_hits(self) -> int:
        return self._cache_hits.value

    @property
    def cache_misses(self) -> int:
        return self._cache_misses.value

    def cache_hit_rate(self) -> float:
        return self.report().hit_rate

    def report(self) -> MetricsReport:
        return MetricsReport(
            calculation_time_micros=self._calculation_time.value,
            cache_hits=self._cache_hits.value,
            cache_misses=self._cache_misses.value,
            asset_load_time_micros=self._asset_load_time.value,
            asset_loads=self._asset_loads.value,
            asset_failures=self._asset_failures.value,
        )
