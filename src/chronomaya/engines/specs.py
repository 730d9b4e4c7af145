"""
chronomaya.engines.specs
------------------------
Frozen configuration values: correlation constants, name tables, historical
events and the glyph path table. Everything here is immutable and built once;
engines receive a spec by reference instead of reaching for module globals.
"""

from __future__ import annotations

import os
import re
import unicodedata
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from ..core.errors import ConfigurationError, InvalidDate
from ..core.time import gregorian_to_jdn
from ..core.types import GlyphCategory


# ============================================================
# CORRELATION CONSTANTS
# ============================================================

# GMT correlation: Long Count 13.0.0.0.0 = JDN 584283 = -3113-08-11 (proleptic Gregorian).
GMT_CORRELATION = 584283

# Offsets that place day offset 0 on 4 Ajaw 8 Kumk'u.
TZOLKIN_NUMBER_OFFSET = 3    # (0 + 3) mod 13 + 1 = 4
TZOLKIN_NAME_OFFSET = 19     # (0 + 19) mod 20 = Ajaw
HAAB_OFFSET = 348            # 348 = 17 * 20 + 8 -> 8 Kumk'u
YEAR_BEARER_OFFSET = 348


# ============================================================
# NAME TABLES
# ============================================================

TZOLKIN_NAMES = (
    "Imix", "Ik'", "Ak'b'al", "K'an", "Chikchan",
    "Kimi", "Manik'", "Lamat", "Muluk", "Ok",
    "Chuwen", "Eb'", "B'en", "Ix", "Men",
    "Kib'", "Kab'an", "Etz'nab'", "Kawak", "Ajaw",
)

TZOLKIN_KICHE_NAMES = (
    "Imox", "Iq'", "Aq'ab'al", "K'at", "Kan",
    "Kame", "Kej", "Q'anil", "Tojil", "Tz'i'",
    "B'atz'", "E", "Aj", "Ix", "Tz'ikin",
    "Ajmaq", "No'j", "Tijax", "Kawoq", "Ajpu",
)

HAAB_MONTHS = (
    "Pop", "Wo'", "Sip", "Sotz'", "Sek", "Xul", "Yaxk'in", "Mol",
    "Ch'en", "Yax", "Sak'", "Keh", "Mak", "K'ank'in", "Muwan", "Pax",
    "K'ayab", "Kumk'u", "Wayeb'",
)

HAAB_KICHE_MONTHS = (
    "Pop", "Wo'", "Sip", "Zotz'", "Tzek", "Xul", "Yaxk'in", "Mol",
    "Chen", "Yax", "Zac", "Keh", "Mak", "Kank'in", "Muwan", "Pax",
    "Kayab", "Kumk'u", "Wayeb'",
)

# Haab' new-year patrons, indexed by floor_mod(jdn + offset, 260) % 4.
YEAR_BEARERS = ("Ik'", "Manik'", "Eb'", "K'an")

HISTORICAL_EVENTS: Tuple[Tuple[int, int, int, str], ...] = (
    (-3113, 8, 11, "The Maya creation date (13.0.0.0.0)"),
    (292, 1, 1, "Earliest Long Count Date Found"),
    (378, 1, 16, "Teotihuacan Influence Over Tikal Begins"),
    (426, 1, 1, "Dynasty of Copán Founded"),
    (562, 1, 1, "Tikal Defeated by Calakmul"),
    (682, 6, 3, "King Jasaw Chan K'awiil I Crowned in Tikal"),
    (751, 1, 1, "Uxmal Emerges as a Major Power"),
    (869, 12, 1, "Tikal Abandoned"),
    (987, 1, 1, "Toltec-Maya Rule in Chichen Itzá Begins"),
    (1200, 1, 1, "Decline of Chichen Itzá"),
    (1511, 8, 1, "Spanish Make First Contact with the Maya"),
    (1697, 3, 13, "Spanish Conquer the Last Maya City, Tayasal"),
)


@dataclass(frozen=True)
class MayaSpec:
    """Constants consumed by the calendar math. Validated on construction."""
    correlation: Optional[int] = GMT_CORRELATION
    tzolkin_number_offset: int = TZOLKIN_NUMBER_OFFSET
    tzolkin_name_offset: int = TZOLKIN_NAME_OFFSET
    haab_offset: int = HAAB_OFFSET
    year_bearer_offset: int = YEAR_BEARER_OFFSET

    tzolkin_names: Tuple[str, ...] = TZOLKIN_NAMES
    tzolkin_kiche_names: Tuple[str, ...] = TZOLKIN_KICHE_NAMES
    haab_months: Tuple[str, ...] = HAAB_MONTHS
    haab_kiche_months: Tuple[str, ...] = HAAB_KICHE_MONTHS
    year_bearers: Tuple[str, ...] = YEAR_BEARERS
    historical_events: Tuple[Tuple[int, int, int, str], ...] = HISTORICAL_EVENTS

    events_by_jdn: Mapping[int, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.validate()
        events: Dict[int, str] = {}
        for y, m, d, text in self.historical_events:
            try:
                events[gregorian_to_jdn(y, m, d)] = text
            except InvalidDate as e:
                raise ConfigurationError(f"Bad historical event date {y}-{m}-{d}: {e}") from e
        object.__setattr__(self, "events_by_jdn", events)

    def validate(self) -> None:
        if self.correlation is None:
            raise ConfigurationError("Missing correlation constant (JDN of Long Count 13.0.0.0.0)")
        if not isinstance(self.correlation, int) or isinstance(self.correlation, bool):
            raise ConfigurationError(f"Correlation constant must be an int, got {self.correlation!r}")
        for label, table, size in (
            ("tzolkin_names", self.tzolkin_names, 20),
            ("tzolkin_kiche_names", self.tzolkin_kiche_names, 20),
            ("haab_months", self.haab_months, 19),
            ("haab_kiche_months", self.haab_kiche_months, 19),
            ("year_bearers", self.year_bearers, 4),
        ):
            if len(table) != size:
                raise ConfigurationError(f"{label} must have {size} entries, got {len(table)}")

    def tweak(self, **kwargs: Any) -> "MayaSpec":
        return replace(self, **kwargs)


# ============================================================
# GLYPH TABLE
# ============================================================

TZOLKIN_GLYPH_STEMS = (
    "imix", "ik", "akbal", "kan", "chikchan",
    "kimi", "manik", "lamat", "muluk", "ok",
    "chuwen", "eb", "ben", "ix", "men",
    "kib", "kaban", "etznab", "kawak", "ajaw",
)

HAAB_GLYPH_STEMS = (
    "pop", "wo", "sip", "sotz", "sek", "xul", "yaxkin", "mol",
    "chen", "yax", "sak", "keh", "mak", "kankin", "muwan", "pax",
    "kayab", "kumku", "wayeb",
)

PathLike = Union[str, "os.PathLike[str]"]

_NON_STEM = re.compile(r"[^a-z0-9_-]+")


def normalize_glyph_name(name: str) -> str:
    """Case-fold and strip everything not valid in a file stem (apostrophes, accents, spaces)."""
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    return _NON_STEM.sub("", decomposed.encode("ascii", "ignore").decode("ascii"))


@dataclass(frozen=True)
class GlyphSpec:
    """Category -> symbolic name -> file path.

    Lookups go through the normalized name, so "Ak'b'al", "ak'b'al" and
    "AKBAL" resolve to the same entry.
    """
    entries: Tuple[Tuple[GlyphCategory, str, Path], ...] = ()

    by_key: Mapping[Tuple[GlyphCategory, str], Path] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        table: Dict[Tuple[GlyphCategory, str], Path] = {}
        for category, name, path in self.entries:
            key = (GlyphCategory(category), normalize_glyph_name(name))
            if not key[1]:
                raise ConfigurationError(f"Glyph name normalizes to nothing: {name!r}")
            table[key] = Path(path)
        object.__setattr__(self, "by_key", table)

    @classmethod
    def from_root(cls, root: PathLike, maya: Optional[MayaSpec] = None) -> "GlyphSpec":
        """Default layout: <root>/tzolkin/glyphs/<stem>.png and <root>/haab/glyphs/<stem>.png."""
        maya = maya or DEFAULT_MAYA
        base = Path(root)
        entries = []
        for name, stem in zip(maya.tzolkin_names, TZOLKIN_GLYPH_STEMS):
            entries.append((GlyphCategory.TZOLKIN, name, base / "tzolkin" / "glyphs" / f"{stem}.png"))
        for name, stem in zip(maya.haab_months, HAAB_GLYPH_STEMS):
            entries.append((GlyphCategory.HAAB, name, base / "haab" / "glyphs" / f"{stem}.png"))
        return cls(tuple(entries))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: Optional[PathLike] = None) -> "GlyphSpec":
        if not isinstance(data, Mapping):
            raise ConfigurationError("Glyph table must be a mapping")
        root = Path(str(data.get("root") or "."))
        if base is not None and not root.is_absolute():
            root = Path(base) / root
        entries = []
        for category in GlyphCategory:
            section = data.get(category.value) or {}
            if not isinstance(section, Mapping):
                raise ConfigurationError(f"Section '{category.value}' must map names to paths")
            for name, rel in section.items():
                p = Path(str(rel))
                entries.append((category, str(name), p if p.is_absolute() else root / p))
        return cls(tuple(entries))

    @classmethod
    def from_yaml(cls, path: PathLike) -> "GlyphSpec":
        """Load a table shaped like {root: ..., tzolkin: {name: path}, haab: {name: path}}.

        Relative paths are resolved against ``root``, which is itself resolved
        against the YAML file's directory.
        """
        p = Path(path)
        try:
            with p.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except OSError as e:
            raise ConfigurationError(f"Cannot read glyph table {p}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed glyph table {p}: {e}") from e
        return cls.from_mapping(data, base=p.parent)

    def names(self, category: GlyphCategory) -> Tuple[str, ...]:
        return tuple(name for cat, name, _ in self.entries if cat == category)

    def path_for(self, category: GlyphCategory, name: str) -> Optional[Path]:
        return self.by_key.get((GlyphCategory(category), normalize_glyph_name(name)))


# ============================================================
# ENGINE SPEC
# ============================================================

@dataclass(frozen=True)
class EngineSpec:
    """Top-level wrapper: everything needed to build a calculator and an asset cache."""
    maya: MayaSpec = field(default_factory=MayaSpec)
    glyphs: GlyphSpec = field(default_factory=GlyphSpec)
    cache_capacity: int = 4096
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.cache_capacity, int) or self.cache_capacity < 1:
            raise ConfigurationError(f"cache_capacity must be a positive int, got {self.cache_capacity!r}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers!r}")

    @property
    def workers(self) -> int:
        return self.max_workers or os.cpu_count() or 1

    def tweak(self, **kwargs: Any) -> "EngineSpec":
        return replace(self, **kwargs)


DEFAULT_MAYA = MayaSpec()
DEFAULT_GLYPH_ROOT = Path("assets")
DEFAULT_SPEC = EngineSpec(maya=DEFAULT_MAYA, glyphs=GlyphSpec.from_root(DEFAULT_GLYPH_ROOT, DEFAULT_MAYA))
