from __future__ import annotations

import argparse
import random

from chronomaya.core.time import gregorian_to_jdn, jdn_to_gregorian
from chronomaya.core.types import LongCount
from chronomaya.engines.maya import haab_from_day_offset, tzolkin_from_day_offset
from chronomaya.engines.specs import GMT_CORRELATION


def roundtrip_test(N: int, lo: int, hi: int, seed: int, *, max_failures: int) -> int:
    random.seed(seed)
    failures = 0

    for _ in range(N):
        d0 = random.randint(lo, hi)

        lc = LongCount.from_day_offset(d0)
        if lc.to_day_offset() != d0:
            failures += 1
            print("\nFAIL (long count)")
            print("d0:", d0)
            print("lc:", lc)
            print("back:", lc.to_day_offset())

        g = jdn_to_gregorian(d0 + GMT_CORRELATION)
        back = gregorian_to_jdn(g.year, g.month, g.day) - GMT_CORRELATION
        if back != d0:
            failures += 1
            print("\nFAIL (gregorian)")
            print("d0:", d0)
            print("greg:", g)
            print("back:", back)

        t = tzolkin_from_day_offset(d0)
        h = haab_from_day_offset(d0)
        if not (1 <= t.number <= 13 and 0 <= t.day_index <= 19 and 0 <= h.day <= 19 and 0 <= h.month_index <= 18):
            failures += 1
            print("\nFAIL (calendar round bounds)")
            print("d0:", d0, "tzolkin:", t, "haab:", h)

        if failures >= max_failures:
            return failures

    return failures


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Random round-trip tests: day offset -> Long Count / Gregorian -> day offset.")
    p.add_argument("--N", type=int, default=20000, help="Trials.")
    p.add_argument("--lo", type=int, default=-200_000, help="Lowest day offset.")
    p.add_argument("--hi", type=int, default=2_000_000, help="Highest day offset.")
    p.add_argument("--seed", type=int, default=123, help="RNG seed.")
    p.add_argument("--max-failures", type=int, default=5, help="Stop after this many failures.")
    args = p.parse_args(argv)

    if args.hi < args.lo:
        raise SystemExit("--hi must be >= --lo")

    f = roundtrip_test(args.N, args.lo, args.hi, args.seed, max_failures=args.max_failures)
    if f == 0:
        print("All round-trip tests passed.")
        return 0

    print(f"Round-trip failures: {f}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
