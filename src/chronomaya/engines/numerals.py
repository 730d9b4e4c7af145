from __future__ import annotations

from typing import List

from ..core.types import LongCount

# Unicode block "Mayan Numerals", U+1D2E0 (zero) .. U+1D2F3 (nineteen).
MAYA_NUMERAL_BASE = 0x1D2E0
ZERO_SHELL = "\U0001D2E0"
BAR = "▬"
DOT = "●"


def maya_numeral(n: int) -> str:
    """Single numeral glyph for 0..19."""
    if not 0 <= n <= 19:
        raise ValueError(f"Maya numeral digit out of range: {n}")
    return chr(MAYA_NUMERAL_BASE + n)


def base20_digits(n: int) -> List[int]:
    if n < 0:
        raise ValueError(f"Negative numbers have no Maya numeral form: {n}")
    digits = [n % 20]
    n //= 20
    while n:
        digits.append(n % 20)
        n //= 20
    return digits[::-1]


def to_maya_numerals(n: int) -> str:
    """Base-20 digits of n as numeral glyphs, most significant first."""
    return " ".join(maya_numeral(d) for d in base20_digits(n))


def bar_dot(n: int) -> str:
    """Bar-and-dot text form of 0..19: one line per bar, dots on the last line."""
    if not 0 <= n <= 19:
        raise ValueError(f"Bar-dot digit out of range: {n}")
    if n == 0:
        return ZERO_SHELL
    bars, dots = divmod(n, 5)
    lines = [BAR] * bars
    if dots:
        lines.append(" ".join(DOT * dots))
    return "\n".join(lines)


def long_count_numerals(lc: LongCount) -> str:
    """Each place as one numeral glyph. Places outside 0..19 fall back to base-20 groups."""
    out = []
    for p in lc.places():
        if 0 <= p <= 19:
            out.append(maya_numeral(p))
        else:
            sign = "-" if p < 0 else ""
            out.append(f"[{sign}{to_maya_numerals(abs(p))}]")
    return " ".join(out)
