"""chronomaya public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

# Initialize the default engine on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    snapshot,
    snapshot_for_date,
    calculate_range,
    glyph,
    preload_glyphs,
    metrics_report,
    make_engine,
    configure,
    get_engine,
    set_engine,
)
from .core.errors import (
    ChronoMayaError,
    InvalidDate,
    ConfigurationError,
    AssetError,
    UnknownGlyph,
    AssetIOError,
    AssetDecodeError,
    DimensionMismatch,
)
from .core.types import (
    CalendarSnapshot,
    LongCount,
    TzolkinDate,
    HaabDate,
    GregorianDate,
    GlyphCategory,
    AssetKey,
    MetricsReport,
    PreloadReport,
)
from .engines.specs import EngineSpec, MayaSpec, GlyphSpec

__version__ = "0.1.0"

__all__ = [
    "snapshot",
    "snapshot_for_date",
    "calculate_range",
    "glyph",
    "preload_glyphs",
    "metrics_report",
    "make_engine",
    "configure",
    "get_engine",
    "set_engine",
    "ChronoMayaError",
    "InvalidDate",
    "ConfigurationError",
    "AssetError",
    "UnknownGlyph",
    "AssetIOError",
    "AssetDecodeError",
    "DimensionMismatch",
    "CalendarSnapshot",
    "LongCount",
    "TzolkinDate",
    "HaabDate",
    "GregorianDate",
    "GlyphCategory",
    "AssetKey",
    "MetricsReport",
    "PreloadReport",
    "EngineSpec",
    "MayaSpec",
    "GlyphSpec",
]
