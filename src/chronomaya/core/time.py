from __future__ import annotations

from .errors import InvalidDate
from .types import GregorianDate

_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def floor_mod(x, m):
    """Modulo with the sign of m, i.e. ((x % m) + m) % m for any sign of x."""
    return ((x % m) + m) % m


def is_leap_year(year: int) -> bool:
    """Proleptic Gregorian rule, astronomical year numbering."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidDate(f"Month out of range: {month}")
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_DAYS[month - 1]


def validate_ymd(year: int, month: int, day: int) -> None:
    n = days_in_month(year, month)
    if not 1 <= day <= n:
        raise InvalidDate(f"Day out of range for {year}-{month:02d}: {day} (1..{n})")


def gregorian_to_jdn(year: int, month: int, day: int) -> int:
    """Convert a proleptic Gregorian date to Julian Day Number (JDN).

    Valid for any integer year, including year 0 and negative (BCE) years.
    """
    validate_ymd(year, month, day)
    a = (14 - month) // 12
    y2 = year + 4800 - a
    m2 = month + 12 * a - 3
    return day + (153 * m2 + 2) // 5 + 365 * y2 + y2 // 4 - y2 // 100 + y2 // 400 - 32045


def jdn_to_gregorian(jdn: int) -> GregorianDate:
    """Fliegel-Van Flandern inverse of gregorian_to_jdn."""
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    return GregorianDate(year, month, day)
