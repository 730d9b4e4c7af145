from __future__ import annotations
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

# Day offset 0 (JDN 584283 under the GMT correlation) is 13.0.0.0.0.
ERA_BAKTUN = 13

KIN_PER_UINAL = 20
KIN_PER_TUN = 360
KIN_PER_KATUN = 7_200
KIN_PER_BAKTUN = 144_000


@dataclass(frozen=True)
class LongCount:
    baktun: int
    katun: int
    tun: int
    uinal: int
    kin: int

    @classmethod
    def from_day_offset(cls, days: int) -> "LongCount":
        """Decompose a day offset into places; floor division keeps lower places non-negative."""
        q, rem = divmod(days, KIN_PER_BAKTUN)
        katun, rem = divmod(rem, KIN_PER_KATUN)
        tun, rem = divmod(rem, KIN_PER_TUN)
        uinal, kin = divmod(rem, KIN_PER_UINAL)
        return cls(ERA_BAKTUN + q, katun, tun, uinal, kin)

    def to_day_offset(self) -> int:
        return (
            (self.baktun - ERA_BAKTUN) * KIN_PER_BAKTUN
            + self.katun * KIN_PER_KATUN
            + self.tun * KIN_PER_TUN
            + self.uinal * KIN_PER_UINAL
            + self.kin
        )

    def places(self) -> Tuple[int, int, int, int, int]:
        return (self.baktun, self.katun, self.tun, self.uinal, self.kin)

    @property
    def conventional_baktun(self) -> int:
        """Baktun as inscriptions write it, cycling 1..13 (2012-12-21 is 13 again)."""
        return (self.baktun - 1) % 13 + 1

    def conventional(self) -> str:
        return ".".join(str(p) for p in (self.conventional_baktun, self.katun, self.tun, self.uinal, self.kin))

    def __str__(self) -> str:
        return ".".join(str(p) for p in self.places())


@dataclass(frozen=True)
class TzolkinDate:
    number: int       # 1..13
    day_index: int    # 0..19, 0 = Imix
    name: str
    kiche_name: str

    def __str__(self) -> str:
        return f"{self.number} {self.name}"


@dataclass(frozen=True)
class HaabDate:
    day: int          # 0..19 (0..4 in Wayeb')
    month_index: int  # 0..18, 18 = Wayeb'
    month: str
    kiche_month: str

    def __str__(self) -> str:
        return f"{self.day} {self.month}"


@dataclass(frozen=True)
class GregorianDate:
    """Proleptic Gregorian date with astronomical year numbering (year 0 = 1 BCE)."""
    year: int
    month: int
    day: int

    def __str__(self) -> str:
        sign = "-" if self.year < 0 else ""
        return f"{sign}{abs(self.year):04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class SolarEvent:
    label: str
    days_until: int


@dataclass(frozen=True)
class CalendarSnapshot:
    day_offset: int
    jdn: int
    gregorian: GregorianDate
    long_count: LongCount
    tzolkin: TzolkinDate
    haab: HaabDate
    moon_phase: str
    venus_phase: str
    year_bearer: str
    eclipse_status: str
    next_solar_event: SolarEvent
    historical_event: Optional[str] = None

    def clone(self) -> "CalendarSnapshot":
        # Frozen all the way down: sharing the instance is the cheap clone.
        return self

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class GlyphCategory(str, Enum):
    TZOLKIN = "tzolkin"
    HAAB = "haab"


@dataclass(frozen=True)
class AssetKey:
    category: GlyphCategory
    name: str


@dataclass(frozen=True)
class PreloadFailure:
    category: GlyphCategory
    name: str
    reason: str


@dataclass(frozen=True)
class PreloadReport:
    loaded: Tuple[AssetKey, ...] = ()
    failures: Tuple[PreloadFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    def __str__(self) -> str:
        lines = [f"Loaded {len(self.loaded)} glyphs, {len(self.failures)} failed"]
        for f in self.failures:
            lines.append(f"  {f.category.value}/{f.name}: {f.reason}")
        return "\n".join(lines)


@dataclass(frozen=True)
class MetricsReport:
    calculation_time_micros: int
    cache_hits: int
    cache_misses: int
    asset_load_time_micros: int
    asset_loads: int = 0
    asset_failures: int = 0
    hit_rate: float = field(init=False)

    def __post_init__(self) -> None:
        total = self.cache_hits + self.cache_misses
        object.__setattr__(self, "hit_rate", self.cache_hits / total if total else 0.0)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        return (
            "Performance Metrics:\n"
            f"  Calculation Time: {self.calculation_time_micros}µs\n"
            f"  Cache Hits: {self.cache_hits}\n"
            f"  Cache Misses: {self.cache_misses}\n"
            f"  Cache Hit Rate: {self.hit_rate * 100:.2f}%\n"
            f"  Asset Load Time: {self.asset_load_time_micros}µs "
            f"({self.asset_loads} loaded, {self.asset_failures} failed)"
        )
