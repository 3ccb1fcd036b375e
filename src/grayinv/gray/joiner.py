"""
Gray Join: two enumerators composed into one sequence.

A "large" and a "small" group are enumerated independently and the small
selection is placed above the large one in the joint bitmask. The large
enumerator advances on every call; the small one only after each full
sweep of the large one. At exactly those calls the large enumerator is at
a turning point and stays put, so the joint sequence still changes by a
single replacement per step.
"""

from grayinv.gray.enumerator import GrayCombinations
from grayinv.selection import Selection

DEFAULT_LARGE = (7, 4)
DEFAULT_SMALL = (4, 3)


class GrayJoin:
    """
    Joint minimal-change sequence over `large[0] + small[0]` items.

    Parameters
    ----------
    large : tuple of (size, pick)
        The group that cycles fastest, occupying the low bits.
    small : tuple of (size, pick)
        The group that advances once per large sweep, in the high bits.

    Examples
    --------
    >>> join = GrayJoin()
    >>> join.total_combinations()
    140
    >>> join.next().count()
    7
    """

    def __init__(self, large=DEFAULT_LARGE, small=DEFAULT_SMALL):
        self.large = GrayCombinations(*large)
        self.small = GrayCombinations(*small)
        self.size = self.large.size + self.small.size
        self.pick = self.large.pick + self.small.pick
        self.count = 0

    def next(self):
        """Return the current joint Selection and step both enumerators."""
        ret = Selection.join(self.small.selection(), self.large.selection())
        self.count += 1
        if self.count % self.large.total_combinations() == 0:
            self.small.advance()
        self.large.advance()
        return ret

    __next__ = next

    def __iter__(self):
        return self

    def take(self, count):
        """The next `count` selections as a list."""
        return [self.next() for _ in range(count)]

    def total_combinations(self):
        """Number of distinct joint selections in one pass."""
        return (self.large.total_combinations()
                * self.small.total_combinations())

    def __repr__(self):
        return (f"GrayJoin(large=({self.large.size}, {self.large.pick}), "
                f"small=({self.small.size}, {self.small.pick}), "
                f"calls={self.count})")
