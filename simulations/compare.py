# simulations/compare.py

from __future__ import annotations

import argparse
import logging
import sys

import matplotlib.pyplot as plt

from mmpa import DEFAULT_THRESHOLD, Method, SplitPolicy

from .common import common_x_range, format_stats_line
from .run import run_all


# Keep the tool intentionally opinionated:
# - score noise is fixed (so the CLI stays minimal)
# - seed defaults to a fixed value for reproducible plots
DEFAULT_SEED = 42
DEFAULT_SCORE_NOISE = 0.5


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        description="Compare pooled-testing strategies via Monte Carlo (same x-axis ATR plots)."
    )
    parser.add_argument("--n", type=int, default=300, help="cohort size")
    parser.add_argument("--prevalence", type=float, default=0.1, help="fraction above threshold")
    parser.add_argument("--pool-size", type=int, default=5, help="pool size K")
    parser.add_argument("--perms", type=int, default=200, help="number of random permutations")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="base RNG seed")
    parser.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD, help="positivity cutoff")
    parser.add_argument(
        "--methods",
        nargs="+",
        default=[m.value for m in Method],
        help="e.g. minipool mpa mmpa",
    )
    parser.add_argument(
        "--split",
        choices=[p.value for p in SplitPolicy],
        default=SplitPolicy.SEQUENTIAL.value,
        help="subdivision policy for mpa / mmpa",
    )
    parser.add_argument("--no-plot", action="store_true", help="print stats only")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    results = run_all(
        n=args.n,
        prevalence=args.prevalence,
        pool_size=args.pool_size,
        perm_num=args.perms,
        seed=args.seed,
        threshold=args.threshold,
        score_noise=DEFAULT_SCORE_NOISE,
        split=args.split,
        methods=args.methods,
    )

    # Print stats
    for r in results:
        print(format_stats_line(r))

    if args.no_plot:
        return 0

    # Plot with same x-axis
    xmin, xmax = common_x_range(results)

    plt.figure(figsize=(4 * len(results), 4))

    for i, r in enumerate(results, start=1):
        plt.subplot(1, len(results), i)
        plt.hist(r.matrix.atr(), bins=40, range=(xmin, xmax))
        plt.title(r.method)
        plt.xlabel("Assays per 100 individuals")
        if i == 1:
            plt.ylabel("Number of permutations")
        plt.xlim(xmin, xmax)

    plt.suptitle(
        f"ATR (n={args.n}, prevalence={args.prevalence}, K={args.pool_size}, "
        f"perms={args.perms}, split={args.split})"
    )
    plt.tight_layout(rect=[0, 0.02, 1, 0.92])
    plt.show()

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
