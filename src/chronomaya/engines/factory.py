"""
chronomaya.engines.factory
--------------------------
Turns frozen configuration values into live calculator and asset-cache objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.engine import AssetProvider
from .assets import AssetCache
from .cache import CalendarCache
from .calculator import CalendarCalculator
from .metrics import Metrics
from .specs import DEFAULT_SPEC, EngineSpec


@dataclass
class Engine:
    """A calculator and an asset cache sharing one Metrics instance."""
    spec: EngineSpec
    calculator: CalendarCalculator
    assets: AssetCache
    metrics: Metrics

    def close(self) -> None:
        self.calculator.close()


def make_calculator(spec: EngineSpec = DEFAULT_SPEC, *, metrics: Optional[Metrics] = None) -> CalendarCalculator:
    return CalendarCalculator(
        CalendarCache(spec.cache_capacity),
        metrics,
        spec=spec.maya,
        max_workers=spec.workers,
    )


def make_asset_cache(
    spec: EngineSpec = DEFAULT_SPEC,
    *,
    provider: Optional[AssetProvider] = None,
    metrics: Optional[Metrics] = None,
) -> AssetCache:
    return AssetCache(spec.glyphs, provider, metrics, max_workers=spec.workers)


def make_engine(spec: EngineSpec = DEFAULT_SPEC, *, provider: Optional[AssetProvider] = None) -> Engine:
    """The universal entry point."""
    metrics = Metrics()
    return Engine(
        spec=spec,
        calculator=make_calculator(spec, metrics=metrics),
        assets=make_asset_cache(spec, provider=provider, metrics=metrics),
        metrics=metrics,
    )
