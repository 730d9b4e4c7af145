from __future__ import annotations

from typing import List, Optional

from .core.engine import AssetProvider
from .core.types import CalendarSnapshot, GlyphCategory, MetricsReport, PreloadReport
from .engines.factory import Engine, make_engine as _make_engine
from .engines.specs import DEFAULT_SPEC, EngineSpec, GlyphSpec

_engine: Optional[Engine] = None

def set_engine(engine: Engine) -> None:
    global _engine
    if _engine is not None and _engine is not engine:
        _engine.close()
    _engine = engine

def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized")
    return _engine

def make_engine(spec: EngineSpec = DEFAULT_SPEC, *, provider: Optional[AssetProvider] = None) -> Engine:
    return _make_engine(spec, provider=provider)

def configure(spec: EngineSpec, *, provider: Optional[AssetProvider] = None) -> Engine:
    """Replace the default engine; caches start empty."""
    eng = _make_engine(spec, provider=provider)
    set_engine(eng)
    return eng

def snapshot(day_offset: int) -> CalendarSnapshot:
    return get_engine().calculator.calculate_single_date(day_offset)

def snapshot_for_date(year: int, month: int, day: int) -> CalendarSnapshot:
    return get_engine().calculator.calculate_for_date(year, month, day)

def calculate_range(start_offset: int, count: int) -> List[CalendarSnapshot]:
    return get_engine().calculator.calculate_range(start_offset, count)

def glyph(category: GlyphCategory, name: str):
    return get_engine().assets.get_texture(category, name)

def preload_glyphs(glyphs: Optional[GlyphSpec] = None, *, parallel: bool = True) -> PreloadReport:
    return get_engine().assets.preload_all(glyphs, parallel=parallel)

def metrics_report() -> MetricsReport:
    return get_engine().metrics.report()
