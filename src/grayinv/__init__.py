"""
grayinv - Incremental inversion of minimal-change matrix subsets
=================================================================

Inverts the submatrix of every k-subset of a universe matrix, where each
subset differs from the previous one by a single replaced item, using two
Sherman-Morrison rank-1 updates per step instead of a full inversion.

Quick start:
    import grayinv

    join = grayinv.GrayJoin()                    # 7-choose-4 x 4-choose-3
    universe = grayinv.random_universe(join.size)
    engine = grayinv.IncrementalInverse(universe, join.next())
    for _ in range(join.total_combinations() - 1):
        engine.advance(join.next())
    engine.is_finite()

    # Time the variants
    results = grayinv.run_benchmarks(iterations=100, verbose=True)

License: MIT
"""

__version__ = "0.1.0"

from grayinv.selection import Selection
from grayinv.gray import GrayCombinations, GrayJoin
from grayinv.mapping import IndexMapping, ReplacementError
from grayinv.matrix import random_universe, sherman_morrison_update
from grayinv.engine import IncrementalInverse
from grayinv.validate import check_inverse
from grayinv.benchmark import run_benchmarks

__all__ = [
    "Selection", "GrayCombinations", "GrayJoin", "IndexMapping",
    "ReplacementError", "random_universe", "sherman_morrison_update",
    "IncrementalInverse", "check_inverse", "run_benchmarks",
]
