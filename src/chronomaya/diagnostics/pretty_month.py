from __future__ import annotations

import argparse

import chronomaya
from chronomaya.core.time import days_in_month, gregorian_to_jdn


def dow_header(w: int = 9) -> str:
    return " ".join(d.ljust(w) for d in ("Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"))


def cell(top: str, mid: str, bot: str, w: int = 9) -> tuple[str, str, str]:
    return (top[:w].ljust(w), mid[:w].ljust(w), bot[:w].ljust(w))


def print_grid(title: str, weeks: list[list[tuple[str, str, str]]]) -> None:
    header = dow_header()
    print(title)
    print(header)
    print("-" * len(header))
    for wk in weeks:
        for row in range(3):
            print(" ".join(c[row] for c in wk))
    print()


def gregorian_month_calendar(gy: int, gm: int) -> None:
    """Gregorian month grid; each day shows its Tzolk'in and Haab' labels."""
    n = days_in_month(gy, gm)
    first_jdn = gregorian_to_jdn(gy, gm, 1)
    start = chronomaya.snapshot_for_date(gy, gm, 1).day_offset
    snaps = chronomaya.calculate_range(start, n)

    weeks: list[list[tuple[str, str, str]]] = []
    wk: list[tuple[str, str, str]] = []
    pad = first_jdn % 7  # JDN mod 7: 0 = Monday
    for _ in range(pad):
        wk.append(cell("", "", ""))
    for s in snaps:
        wk.append(cell(f"{s.gregorian.day:2d}", str(s.tzolkin), str(s.haab)))
        if len(wk) == 7:
            weeks.append(wk)
            wk = []
    if wk:
        while len(wk) < 7:
            wk.append(cell("", "", ""))
        weeks.append(wk)

    lc0, lc1 = snaps[0].long_count, snaps[-1].long_count
    print_grid(f"Gregorian month  {snaps[0].gregorian}  ({lc0.conventional()} .. {lc1.conventional()})", weeks)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(
        description="Print a Gregorian-month calendar with Tzolk'in and Haab' labels."
    )
    p.add_argument("--greg", nargs=2, type=int, metavar=("GY", "GM"),
                   help="Gregorian month to print: GY GM (e.g. 2012 12)")
    args = p.parse_args(argv)

    if not args.greg:
        # sensible default demo: the end of baktun 13
        gregorian_month_calendar(2012, 12)
        return 0

    gy, gm = args.greg
    gregorian_month_calendar(gy, gm)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
