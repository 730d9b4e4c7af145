"""
chronomaya.engines.maya
-----------------------
Pure calendar math keyed by day offset (days since 13.0.0.0.0) or JDN.

Every cyclic index goes through floor_mod so that offsets before the
correlation epoch land on valid table positions.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..core.time import floor_mod, gregorian_to_jdn, jdn_to_gregorian
from ..core.types import HaabDate, LongCount, SolarEvent, TzolkinDate
from .specs import DEFAULT_MAYA, MayaSpec

SYNODIC_MONTH = 29.530588
VENUS_SYNODIC = 584
SAROS_DAYS = 6585
CALENDAR_ROUND_DAYS = 18_980  # lcm(260, 365)

NEW_MOON = "New Moon"
WAXING_CRESCENT = "Waxing Crescent"
FIRST_QUARTER = "First Quarter"
FULL_MOON = "Full Moon"
LAST_QUARTER = "Last Quarter"

MORNING_STAR = "Morning Star (Heliacal Rise)"
SUPERIOR_CONJUNCTION = "Superior Conjunction (Invisible)"
EVENING_STAR = "Evening Star (Heliacal Set)"
INFERIOR_CONJUNCTION = "Inferior Conjunction (Between Earth & Sun)"

LUNAR_ECLIPSE_SOON = "Lunar Eclipse Soon"
SOLAR_ECLIPSE_SOON = "Solar Eclipse Soon"
NO_ECLIPSE = "No Eclipse Imminent"

# (lower bound, label); a value equal to a bound belongs to that bound's bucket.
# [0.1, 0.25) is named Waxing Crescent rather than folded into New Moon, and
# [0.75, 1) stays Last Quarter instead of wrapping back to New Moon.
MOON_BUCKETS: Tuple[Tuple[float, str], ...] = (
    (0.0, NEW_MOON),
    (0.1, WAXING_CRESCENT),
    (0.25, FIRST_QUARTER),
    (0.5, FULL_MOON),
    (0.75, LAST_QUARTER),
)

SOLAR_EVENTS: Tuple[Tuple[str, int, int], ...] = (
    ("Spring Equinox", 3, 20),
    ("Summer Solstice", 6, 21),
    ("Autumn Equinox", 9, 22),
    ("Winter Solstice", 12, 21),
)


# ============================================================
# Offsets and Long Count
# ============================================================

def day_offset_from_jdn(jdn: int, spec: MayaSpec = DEFAULT_MAYA) -> int:
    return jdn - spec.correlation


def jdn_from_day_offset(days: int, spec: MayaSpec = DEFAULT_MAYA) -> int:
    return days + spec.correlation


def day_offset_from_gregorian(year: int, month: int, day: int, spec: MayaSpec = DEFAULT_MAYA) -> int:
    """Raises InvalidDate for impossible dates."""
    return gregorian_to_jdn(year, month, day) - spec.correlation


def long_count_from_day_offset(days: int) -> LongCount:
    return LongCount.from_day_offset(days)


def day_offset_from_long_count(lc: LongCount) -> int:
    return lc.to_day_offset()


# ============================================================
# Calendar Round
# ============================================================

def tzolkin_from_day_offset(days: int, spec: MayaSpec = DEFAULT_MAYA) -> TzolkinDate:
    number = floor_mod(days + spec.tzolkin_number_offset, 13) + 1
    idx = floor_mod(days + spec.tzolkin_name_offset, 20)
    return TzolkinDate(number, idx, spec.tzolkin_names[idx], spec.tzolkin_kiche_names[idx])


def haab_from_day_offset(days: int, spec: MayaSpec = DEFAULT_MAYA) -> HaabDate:
    year_day = floor_mod(days + spec.haab_offset, 365)
    month_index, day = divmod(year_day, 20)
    return HaabDate(day, month_index, spec.haab_months[month_index], spec.haab_kiche_months[month_index])


def calendar_round(days: int, spec: MayaSpec = DEFAULT_MAYA) -> Tuple[TzolkinDate, HaabDate]:
    """The (Tzolk'in, Haab') pair; repeats every CALENDAR_ROUND_DAYS."""
    return tzolkin_from_day_offset(days, spec), haab_from_day_offset(days, spec)


def year_bearer(jdn: int, spec: MayaSpec = DEFAULT_MAYA) -> str:
    idx = floor_mod(jdn + spec.year_bearer_offset, 260) % 4
    return spec.year_bearers[idx]


# ============================================================
# Astronomical cycles
# ============================================================

def moon_age(jdn: int) -> float:
    """Fraction of the mean synodic month elapsed, in [0, 1)."""
    return floor_mod(jdn, SYNODIC_MONTH) / SYNODIC_MONTH


def moon_phase_from_age(age: float) -> str:
    label = MOON_BUCKETS[0][1]
    for lower, name in MOON_BUCKETS:
        if age < lower:
            break
        label = name
    return label


def moon_phase(jdn: int) -> str:
    return moon_phase_from_age(moon_age(jdn))


def venus_phase(jdn: int) -> str:
    phase = floor_mod(jdn, VENUS_SYNODIC)
    if phase < 50:
        return MORNING_STAR
    if phase < 215:
        return SUPERIOR_CONJUNCTION
    if phase < 265:
        return EVENING_STAR
    return INFERIOR_CONJUNCTION


def next_eclipse(jdn: int) -> str:
    since = floor_mod(jdn, SAROS_DAYS)
    if since < 15:
        return LUNAR_ECLIPSE_SOON
    if since < 30:
        return SOLAR_ECLIPSE_SOON
    return NO_ECLIPSE


def next_solstice_or_equinox(year: int, month: int, day: int) -> SolarEvent:
    """First fixed solstice/equinox date on or after (year, month, day).

    Past 21 December the answer is next year's spring equinox. Distances are
    JDN differences, so BCE years behave like any other.
    """
    today = gregorian_to_jdn(year, month, day)
    for label, m, d in SOLAR_EVENTS:
        target = gregorian_to_jdn(year, m, d)
        if target >= today:
            return SolarEvent(label, target - today)
    label, m, d = SOLAR_EVENTS[0]
    return SolarEvent(label, gregorian_to_jdn(year + 1, m, d) - today)


def next_solar_event_for_jdn(jdn: int) -> SolarEvent:
    g = jdn_to_gregorian(jdn)
    return next_solstice_or_equinox(g.year, g.month, g.day)


# ============================================================
# History
# ============================================================

def historical_event(jdn: int, spec: MayaSpec = DEFAULT_MAYA) -> Optional[str]:
    return spec.events_by_jdn.get(jdn)
