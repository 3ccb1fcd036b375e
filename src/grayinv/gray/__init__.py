"""
Gray: minimal-change enumeration of k-subsets.

Consecutive subsets differ by one replaced item, so any per-subset state
(such as a matrix inverse) can be updated rather than rebuilt.

Example:
    from grayinv.gray import GrayCombinations, GrayJoin

    gen = GrayCombinations(size=7, pick=4)
    gen.value()              # current bitmask
    gen.advance()            # one item replaced

    join = GrayJoin(large=(7, 4), small=(4, 3))
    selections = join.take(join.total_combinations())   # 140 Selections
"""

from grayinv.gray import fast
from grayinv.gray.enumerator import Direction, GrayCombinations
from grayinv.gray.joiner import GrayJoin

__all__ = ["Direction", "GrayCombinations", "GrayJoin", "fast"]
