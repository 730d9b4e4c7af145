from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import re
import sys
from typing import Tuple


_DATE_RE = re.compile(r"^(-?\d{1,6})-(\d{1,2})-(\d{1,2})$")


def _parse_ymd(s: str) -> Tuple[int, int, int]:
    """YYYY-MM-DD with astronomical years, so -3113-08-11 is accepted."""
    m = _DATE_RE.match(s)
    if not m:
        raise SystemExit(f"Bad date {s!r}; expected YYYY-MM-DD (year may be negative)")
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def print_snapshot(s) -> None:
    from chronomaya.engines.numerals import long_count_numerals

    print(f"Gregorian Date:       {s.gregorian}")
    print(f"Julian Day Number:    {s.jdn}")
    print(f"Days since 13.0.0.0.0: {s.day_offset}")
    print(f"Long Count:           {s.long_count.conventional()}  (era count {s.long_count})  {long_count_numerals(s.long_count)}")
    print(f"Tzolk'in:             {s.tzolkin} (K'iche': {s.tzolkin.number} {s.tzolkin.kiche_name})")
    print(f"Haab':                {s.haab} (K'iche': {s.haab.day} {s.haab.kiche_month})")
    print(f"Year Bearer:          {s.year_bearer}")
    print(f"Moon Phase:           {s.moon_phase}")
    print(f"Venus Cycle:          {s.venus_phase}")
    print(f"Next Solstice/Equinox: {s.next_solar_event.label} ({s.next_solar_event.days_until} days away)")
    print(f"Eclipse Prediction:   {s.eclipse_status}")
    if s.historical_event:
        print(f"Historical Event:     {s.historical_event}")


def cmd_day(argv: list[str]) -> int:
    import chronomaya

    p = argparse.ArgumentParser(prog="chronomaya day", description="Gregorian -> Maya calendar snapshot")
    p.add_argument("date", help="YYYY-MM-DD (astronomical year, may be negative)")
    if argv and _DATE_RE.match(argv[0]):
        # A leading "-3113-..." would otherwise be read as an option.
        argv = ["--", *argv]
    args = p.parse_args(argv)

    y, m, d = _parse_ymd(args.date)
    try:
        s = chronomaya.snapshot_for_date(y, m, d)
    except chronomaya.InvalidDate as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    print_snapshot(s)
    return 0


def cmd_offset(argv: list[str]) -> int:
    import chronomaya

    p = argparse.ArgumentParser(prog="chronomaya offset", description="Day offset -> Maya calendar snapshot")
    p.add_argument("offset", type=int, help="days since 13.0.0.0.0")
    args = p.parse_args(argv)

    print_snapshot(chronomaya.snapshot(args.offset))
    return 0


def cmd_range(argv: list[str]) -> int:
    import chronomaya

    p = argparse.ArgumentParser(prog="chronomaya range", description="One line per day for a range of day offsets")
    p.add_argument("start", type=int)
    p.add_argument("count", type=int)
    args = p.parse_args(argv)

    for s in chronomaya.calculate_range(args.start, args.count):
        print(f"{s.day_offset:>9d}  {str(s.gregorian):>12s}  {str(s.long_count):<14s} {str(s.tzolkin):<14s} {s.haab}")
    return 0


def cmd_glyphs(argv: list[str]) -> int:
    import chronomaya
    from chronomaya.engines.specs import GlyphSpec

    p = argparse.ArgumentParser(prog="chronomaya glyphs", description="Preload every glyph and report failures")
    g = p.add_mutually_exclusive_group()
    g.add_argument("--root", default="assets", help="asset root with tzolkin/glyphs and haab/glyphs")
    g.add_argument("--yaml", help="YAML glyph table")
    p.add_argument("--serial", action="store_true", help="load one glyph at a time")
    args = p.parse_args(argv)

    try:
        glyphs = GlyphSpec.from_yaml(args.yaml) if args.yaml else GlyphSpec.from_root(args.root)
    except chronomaya.ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    eng = chronomaya.configure(chronomaya.get_engine().spec.tweak(glyphs=glyphs))
    report = eng.assets.preload_all(parallel=not args.serial)
    print(report)
    print()
    print(eng.metrics.report())
    return 0 if report.ok else 1


def cmd_metrics(argv: list[str]) -> int:
    import chronomaya

    p = argparse.ArgumentParser(prog="chronomaya metrics", description="Compute a range twice and print the metrics report")
    p.add_argument("--start", type=int, default=1_872_000)
    p.add_argument("--count", type=int, default=365)
    args = p.parse_args(argv)

    chronomaya.calculate_range(args.start, args.count)
    chronomaya.calculate_range(args.start, args.count)
    print(chronomaya.metrics_report())
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    # Shortcut: `chronomaya YYYY-MM-DD`
    if argv and _DATE_RE.match(argv[0]):
        return cmd_day(argv)

    p = argparse.ArgumentParser(prog="chronomaya", description="Maya calendar engine CLI.")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("day", help="Gregorian -> Maya calendar snapshot")
    sub.add_parser("offset", help="Day offset -> Maya calendar snapshot")
    sub.add_parser("range", help="Snapshots for START COUNT day offsets")
    sub.add_parser("glyphs", help="Preload glyph images and report failures")
    sub.add_parser("metrics", help="Print cache/timing metrics after a sample run")

    # diagnostics
    sub.add_parser("pretty-month", help="Print a Gregorian month with Tzolk'in/Haab' labels (diagnostics)")
    sub.add_parser("round-trip", help="Random round-trip checks (diagnostics)")
    sub.add_parser("bench", help="Time cold vs cached range calculations (diagnostics)")

    args, rest = p.parse_known_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )

    if args.cmd == "day":
        return cmd_day(rest)

    if args.cmd == "offset":
        return cmd_offset(rest)

    if args.cmd == "range":
        return cmd_range(rest)

    if args.cmd == "glyphs":
        return cmd_glyphs(rest)

    if args.cmd == "metrics":
        return cmd_metrics(rest)

    tool_map = {
        "pretty-month": "chronomaya.diagnostics.pretty_month",
        "round-trip": "chronomaya.diagnostics.round_trip",
        "bench": "chronomaya.diagnostics.cache_bench",
    }
    if args.cmd in tool_map:
        return _run_module_main(tool_map[args.cmd], rest)

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
