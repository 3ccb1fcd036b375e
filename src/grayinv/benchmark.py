"""
Benchmark harness: direct inversion vs. incremental updates.

Every variant computes the inverse of one matrix per combination of the
default joint sequence (C(7,4) * C(4,3) = 140 matrices of size 7x7) and
returns a success flag (all inverses finite). `time_func` repeats a
variant for a number of iterations and stops at the first failure.

Variants:
  - direct_random           invert 140 independent random 7x7 matrices
  - direct_random_parallel  same, spread over a process pool
  - direct_subsets          invert every joint submatrix from scratch
  - sherman                 invert the first submatrix, then update it
"""

import functools
import os
import sys
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Callable

import numpy as np

from grayinv.engine import IncrementalInverse
from grayinv.gray import fast as _fast
from grayinv.gray.joiner import GrayJoin, DEFAULT_LARGE, DEFAULT_SMALL
from grayinv import matrix as _matrix

DEFAULT_ITERATIONS = 10000
VARIANTS = ("direct_random", "direct_random_parallel", "direct_subsets", "sherman")


@dataclass
class Benchmark:
    """A named variant returning a success flag per call."""
    name: str
    func: Callable[[], bool]


def time_func(func, iterations):
    """
    Time `iterations` calls of `func`, stopping at the first failure.

    Returns
    -------
    (elapsed, success, completed) : tuple of (float, bool, int)
    """
    success = True
    completed = 0
    t0 = time.perf_counter()
    for _ in range(iterations):
        if not func():
            success = False
            break
        completed += 1
    return time.perf_counter() - t0, success, completed


# ============================================================
# Variants
# ============================================================

def direct_random(size=7, count=140, rng=None):
    """Directly invert `count` independent random matrices."""
    rng = np.random.default_rng(rng)
    success = True
    for _ in range(count):
        inverse = _matrix.direct_inverse(_matrix.random_universe(size, rng))
        success = success and _matrix.all_finite(inverse)
    return success


def _invert_random_batch(args):
    """Worker for direct_random_parallel: owns its matrices and its rng."""
    seed, size, count = args
    return direct_random(size, count, seed)


def direct_random_parallel(executor, workers, size=7, count=140, rng=None):
    """Directly invert `count` random matrices across a process pool."""
    rng = np.random.default_rng(rng)
    seeds = rng.integers(0, 2**63 - 1, size=workers)
    counts = [count // workers + (i < count % workers) for i in range(workers)]
    tasks = [(int(s), size, c) for s, c in zip(seeds, counts) if c > 0]
    return all(executor.map(_invert_random_batch, tasks))


def direct_subsets(large=DEFAULT_LARGE, small=DEFAULT_SMALL, rng=None):
    """Invert the submatrix of every joint selection from scratch."""
    join = GrayJoin(large, small)
    universe = _matrix.random_universe(join.size, rng)
    success = True
    for selection in join.take(join.total_combinations()):
        inverse = _matrix.direct_inverse(
            _matrix.submatrix(universe, selection.positions()))
        success = success and _matrix.all_finite(inverse)
    return success


def sherman(large=DEFAULT_LARGE, small=DEFAULT_SMALL, rng=None):
    """Invert the first joint submatrix, then follow the sequence with
    two Sherman-Morrison updates per replacement."""
    join = GrayJoin(large, small)
    universe = _matrix.random_universe(join.size, rng)
    engine = IncrementalInverse(universe, join.next())
    success = engine.is_finite()
    for _ in range(join.total_combinations() - 1):
        engine.advance(join.next())
        success = success and engine.is_finite()
    return success


# ============================================================
# Runner
# ============================================================

def make_benchmarks(variants, large=DEFAULT_LARGE, small=DEFAULT_SMALL,
                    rng=None, executor=None, workers=1):
    """Bind each requested variant to its parameters."""
    unknown = [v for v in variants if v not in VARIANTS]
    if unknown:
        raise ValueError(f"Unknown variants {unknown}; choose from {VARIANTS}")

    rng = np.random.default_rng(rng)
    size = large[1] + small[1]
    count = GrayJoin(large, small).total_combinations()
    factories = {
        "direct_random": lambda: functools.partial(
            direct_random, size, count, rng),
        "direct_random_parallel": lambda: functools.partial(
            direct_random_parallel, executor, workers, size, count, rng),
        "direct_subsets": lambda: functools.partial(
            direct_subsets, large, small, rng),
        "sherman": lambda: functools.partial(sherman, large, small, rng),
    }
    return [Benchmark(name, factories[name]()) for name in variants]


def run_benchmarks(iterations=DEFAULT_ITERATIONS, variants=VARIANTS,
                   large=DEFAULT_LARGE, small=DEFAULT_SMALL, seed=None,
                   workers=None, verbose=False):
    """
    Time each variant and report elapsed wall-clock time.

    Parameters
    ----------
    iterations : int
        Calls per variant (each call covers one full joint sequence).
    variants : sequence of str
        Names from VARIANTS.
    large, small : tuple of (size, pick)
        Joint sequence configuration.
    seed : int, optional
        Seed for the random universes.
    workers : int, optional
        Process pool size for direct_random_parallel (default: CPU count).
    verbose : bool
        Print one line per variant.

    Returns
    -------
    list of dict
        One record per variant: name, time, success, completed, iterations.
    """
    variants = list(variants)
    _fast.warmup()

    executor = None
    if "direct_random_parallel" in variants:
        workers = workers or os.cpu_count() or 1
        executor = ProcessPoolExecutor(max_workers=workers)

    try:
        benchmarks = make_benchmarks(variants, large, small, seed,
                                     executor, workers or 1)
        if verbose:
            print(f"  [grayinv] {len(benchmarks)} variants x {iterations:,} "
                  f"iterations, large={large}, small={small}")
            sys.stdout.flush()

        results = []
        for bench in benchmarks:
            elapsed, success, completed = time_func(bench.func, iterations)
            results.append({
                "name": bench.name,
                "time": elapsed,
                "success": success,
                "completed": completed,
                "iterations": iterations,
            })
            if verbose:
                status = "OK" if success else f"FAILED after {completed:,}"
                print(f"  {bench.name:<30}{elapsed:.5f}s  {status}")
                sys.stdout.flush()
    finally:
        if executor is not None:
            executor.shutdown()

    return results
