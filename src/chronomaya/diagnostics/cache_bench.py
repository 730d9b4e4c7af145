#!/usr/bin/env python3
from __future__ import annotations

import argparse
import time
from typing import List

from chronomaya.engines.factory import make_calculator
from chronomaya.engines.specs import DEFAULT_SPEC


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "chronomaya[diagnostics]"') from e


def run_passes(start: int, count: int, passes: int, capacity: int, workers: int) -> List[float]:
    """Time `passes` identical calculate_range calls; the first is cold, the rest should hit."""
    spec = DEFAULT_SPEC.tweak(cache_capacity=capacity, max_workers=workers)
    timings = []
    with make_calculator(spec) as calc:
        for i in range(passes):
            t0 = time.perf_counter()
            calc.calculate_range(start, count)
            dt = time.perf_counter() - t0
            timings.append(dt)
            print(f"pass {i:3d}: {dt * 1000:9.3f} ms")
        print()
        print(calc.metrics.report())
    return timings


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Time repeated range calculations against the snapshot cache.")
    p.add_argument("--start", type=int, default=1_872_000, help="First day offset (default: 2012-12-21, thirteen baktun after the epoch).")
    p.add_argument("--count", type=int, default=2000)
    p.add_argument("--passes", type=int, default=5)
    p.add_argument("--capacity", type=int, default=4096)
    p.add_argument("--workers", type=int, default=4)
    p.add_argument("--plot", action="store_true", help="Plot per-pass timings (needs matplotlib).")
    args = p.parse_args(argv)

    timings = run_passes(args.start, args.count, args.passes, args.capacity, args.workers)

    if args.plot:
        plt = _need_matplotlib()
        fig, ax = plt.subplots(figsize=(8, 4))
        ax.bar(range(len(timings)), [t * 1000 for t in timings], color="#3b6ea5")
        ax.set_xlabel("pass")
        ax.set_ylabel("ms")
        ax.set_title(f"calculate_range({args.start}, {args.count}), capacity={args.capacity}")
        fig.tight_layout()
        plt.show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
