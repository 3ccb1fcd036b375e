"""
Command-line entry point: time the inversion variants.

Usage:
    grayinv --iterations 1000
    python -m grayinv --variants direct_random sherman --seed 0 --check
"""

import argparse
import sys

import numpy as np

from grayinv import benchmark as _benchmark
from grayinv.engine import IncrementalInverse
from grayinv.gray.joiner import GrayJoin, DEFAULT_LARGE, DEFAULT_SMALL
from grayinv.matrix import random_universe
from grayinv.validate import check_inverse


def _pair(text):
    size, pick = (int(x) for x in text.split(","))
    return size, pick


def check_sequence(large=DEFAULT_LARGE, small=DEFAULT_SMALL, seed=None,
                   tol=1e-6, verbose=False):
    """
    Follow one joint sequence and compare every maintained inverse with a
    direct one.

    Returns
    -------
    dict
        steps, worst rel_error, worst cond, ok.
    """
    join = GrayJoin(large, small)
    universe = random_universe(join.size, seed)
    engine = IncrementalInverse(universe, join.next())
    worst = check_inverse(engine.matrix, engine.inverse, tol)
    steps = 1
    for _ in range(join.total_combinations() - 1):
        engine.advance(join.next())
        report = check_inverse(engine.matrix, engine.inverse, tol)
        if report["rel_error"] > worst["rel_error"]:
            worst = report
        steps += 1

    result = {
        "steps": steps,
        "rel_error": worst["rel_error"],
        "cond": worst["cond"],
        "ok": worst["ok"],
    }
    if verbose:
        status = "OK" if result["ok"] else "MISMATCH"
        print(f"  [grayinv] check: {steps} steps, worst rel_error="
              f"{result['rel_error']:.2e} (cond={result['cond']}), {status}")
        sys.stdout.flush()
    return result


def build_parser():
    parser = argparse.ArgumentParser(
        prog="grayinv",
        description="Benchmark direct vs. incremental inversion of "
                    "minimal-change matrix subsets.",
    )
    parser.add_argument(
        "--iterations", type=int, default=_benchmark.DEFAULT_ITERATIONS,
        help="Full sequences per variant (default: %(default)s).")
    parser.add_argument(
        "--variants", nargs="+", choices=_benchmark.VARIANTS,
        default=list(_benchmark.VARIANTS), help="Variants to run.")
    parser.add_argument(
        "--large", type=_pair, default=DEFAULT_LARGE, metavar="SIZE,PICK",
        help="Fast-cycling group (default: 7,4).")
    parser.add_argument(
        "--small", type=_pair, default=DEFAULT_SMALL, metavar="SIZE,PICK",
        help="Slow-cycling group (default: 4,3).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Process pool size for direct_random_parallel.")
    parser.add_argument(
        "--check", action="store_true",
        help="Verify the incremental inverses against direct ones first.")
    parser.add_argument("--quiet", action="store_true", help="No output.")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    verbose = not args.quiet
    ok = True

    if args.check:
        seed = np.random.default_rng(args.seed).integers(2**32)
        ok = check_sequence(args.large, args.small, int(seed),
                            verbose=verbose)["ok"]

    results = _benchmark.run_benchmarks(
        iterations=args.iterations,
        variants=args.variants,
        large=args.large,
        small=args.small,
        seed=args.seed,
        workers=args.workers,
        verbose=verbose,
    )
    ok = ok and all(r["success"] for r in results)

    if verbose:
        print(f"  [grayinv] {'SUCCESS' if ok else 'FAILURE'}")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
