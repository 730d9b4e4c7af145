"""
chronomaya.engines.calculator
-----------------------------
Orchestrates the pure calendar math and the snapshot cache.

calculate_single_date is safe to call from any thread. calculate_range fans
out over a fixed-size thread pool and gathers results back by index, so the
returned list always lines up with start_offset + i regardless of which
worker finished first.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from ..core.types import CalendarSnapshot
from . import maya
from .cache import CalendarCache
from .metrics import Metrics
from .specs import DEFAULT_MAYA, MayaSpec

logger = logging.getLogger(__name__)


def build_snapshot(day_offset: int, spec: MayaSpec = DEFAULT_MAYA) -> CalendarSnapshot:
    """Compute every field for one day offset. Pure; touches no shared state."""
    jdn = maya.jdn_from_day_offset(day_offset, spec)
    return CalendarSnapshot(
        day_offset=day_offset,
        jdn=jdn,
        gregorian=maya.jdn_to_gregorian(jdn),
        long_count=maya.long_count_from_day_offset(day_offset),
        tzolkin=maya.tzolkin_from_day_offset(day_offset, spec),
        haab=maya.haab_from_day_offset(day_offset, spec),
        moon_phase=maya.moon_phase(jdn),
        venus_phase=maya.venus_phase(jdn),
        year_bearer=maya.year_bearer(jdn, spec),
        eclipse_status=maya.next_eclipse(jdn),
        next_solar_event=maya.next_solar_event_for_jdn(jdn),
        historical_event=maya.historical_event(jdn, spec),
    )


class CalendarCalculator:
    def __init__(
        self,
        cache: CalendarCache,
        metrics: Optional[Metrics] = None,
        *,
        spec: MayaSpec = DEFAULT_MAYA,
        max_workers: int = 4,
    ) -> None:
        self.cache = cache
        self.metrics = metrics if metrics is not None else Metrics()
        self.spec = spec
        self.max_workers = max_workers
        self._pool: Optional[ThreadPoolExecutor] = None
        self._pool_lock = threading.Lock()

    # ---------------------------------------------------------
    # Single date
    # ---------------------------------------------------------
    def calculate_single_date(self, day_offset: int) -> CalendarSnapshot:
        cached = self.cache.get(day_offset)
        if cached is not None:
            self.metrics.record_cache_hit()
            return cached

        self.metrics.record_cache_miss()
        with self.metrics.time_calculation():
            snap = build_snapshot(day_offset, self.spec)
        self.cache.put(day_offset, snap)
        logger.debug("Computed snapshot for day offset %d (%s)", day_offset, snap.long_count)
        return snap

    def calculate_for_date(self, year: int, month: int, day: int) -> CalendarSnapshot:
        """Gregorian entry point; InvalidDate propagates to the caller."""
        return self.calculate_single_date(maya.day_offset_from_gregorian(year, month, day, self.spec))

    # ---------------------------------------------------------
    # Ranges
    # ---------------------------------------------------------
    def _executor(self) -> ThreadPoolExecutor:
        with self._pool_lock:
            if self._pool is None:
                self._pool = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="chronomaya-calc"
                )
                logger.info("Started calculator pool with max_workers=%d", self.max_workers)
            return self._pool

    def calculate_range(self, start_offset: int, count: int) -> List[CalendarSnapshot]:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        if count == 0:
            return []

        t0 = time.perf_counter()
        pool = self._executor()
        futures = [pool.submit(self.calculate_single_date, start_offset + i) for i in range(count)]
        # Gather in submission order; completion order does not matter.
        results = [f.result() for f in futures]

        logger.info(
            "Calculated %d dates from offset %d in %dµs",
            count,
            start_offset,
            int((time.perf_counter() - t0) * 1_000_000),
        )
        return results

    # ---------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------
    def close(self, wait: bool = True) -> None:
        with self._pool_lock:
            if self._pool is not None:
                self._pool.shutdown(wait=wait)
                self._pool = None
                logger.info("Calculator pool shut down")

    def __enter__(self) -> "CalendarCalculator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
