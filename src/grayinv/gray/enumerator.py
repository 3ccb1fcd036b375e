"""
Gray Enumerator: minimal-change sequence of k-subsets.

Walks the reflected binary Gray code and keeps only the codes with exactly
`pick` set bits. Consecutive codes kept this way differ in exactly two bits
(one item leaves the subset, one item enters), which is what allows the
inverse of the selected submatrix to be updated instead of recomputed.

At the top of the index range the walk turns around and replays the
sequence in reverse; at the bottom it turns forward again. The selection
does not move on the call that turns, so each end of the sweep is reported
twice.
"""

import enum

import numpy as np
from scipy.special import comb

from grayinv.gray import fast as _fast
from grayinv.selection import Selection


class Direction(enum.Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


class GrayCombinations:
    """
    Enumerate all `pick`-subsets of `size` items by single replacements.

    Parameters
    ----------
    size : int
        Number of items in the universe (n), at most MAX_UNIVERSE.
    pick : int
        Number of items selected (k), 1 <= pick <= size.

    Examples
    --------
    >>> gen = GrayCombinations(4, 3)
    >>> bin(gen.value())
    '0b111'
    >>> gen.total_combinations()
    4
    """

    def __init__(self, size, pick):
        if not 1 <= size <= _fast.MAX_UNIVERSE:
            raise ValueError(
                f"size must be in 1..{_fast.MAX_UNIVERSE}, got {size}")
        if not 1 <= pick <= size:
            raise ValueError(f"pick must be in 1..{size}, got {pick}")

        self.size = size
        self.pick = pick
        self.index = 0
        self.direction = Direction.FORWARD
        self._combinations = int(comb(size, pick, exact=True))

        # Index 0 has an empty code; move to the first valid one
        self.advance()

    def advance(self):
        """
        Move to the next valid code in the current direction.

        Returns
        -------
        bool
            True if the selection changed, False if the scan hit a bound
            and only the direction was switched.
        """
        if self.direction is Direction.FORWARD:
            index, turned = _fast.scan_forward(
                np.int64(self.index), self.size, self.pick)
            if turned:
                self.direction = Direction.REVERSE
        else:
            index, turned = _fast.scan_reverse(
                np.int64(self.index), self.pick)
            if turned:
                self.direction = Direction.FORWARD

        self.index = int(index)
        return not turned

    def value(self):
        """The current Gray code as an integer bitmask."""
        return self.index ^ (self.index >> 1)

    current_value = value

    def selection(self):
        """The current Gray code as a Selection."""
        return Selection(self.value(), self.size)

    def total_combinations(self):
        """C(size, pick): length of one sweep."""
        return self._combinations

    def __repr__(self):
        return (f"GrayCombinations(size={self.size}, pick={self.pick}, "
                f"index={self.index}, {self.direction.value})")
