"""
Selection: a fixed-width bitset over the universe.

A Selection is the set of universe positions currently in use, stored as
an integer mask together with the universe size it belongs to. Widths are
capped at MAX_UNIVERSE so that masks stay valid int64 values in the
compiled scan kernels.
"""

import numpy as np

MAX_UNIVERSE = 62


class Selection:
    """
    Immutable subset of {0, ..., size-1}.

    Parameters
    ----------
    mask : int
        Bit i set means universe position i is selected.
    size : int
        Universe size (bit width of the set).

    Examples
    --------
    >>> s = Selection(0b0111, 4)
    >>> s.positions()
    [0, 1, 2]
    >>> 3 in s
    False
    """

    __slots__ = ("mask", "size")

    def __init__(self, mask, size):
        if not 1 <= size <= MAX_UNIVERSE:
            raise ValueError(
                f"Selection size must be in 1..{MAX_UNIVERSE}, got {size}")
        mask = int(mask)
        if mask < 0 or mask >> size:
            raise ValueError(f"Mask {mask:#x} does not fit in {size} bits")
        object.__setattr__(self, "mask", mask)
        object.__setattr__(self, "size", size)

    def __setattr__(self, name, value):
        raise AttributeError("Selection is immutable")

    @classmethod
    def from_positions(cls, positions, size):
        """Build a Selection from an iterable of universe positions."""
        mask = 0
        for pos in positions:
            if not 0 <= pos < size:
                raise ValueError(f"Position {pos} outside universe of {size}")
            mask |= 1 << pos
        return cls(mask, size)

    @classmethod
    def join(cls, high, low):
        """Concatenate two selections, `high` above `low`'s bit width."""
        return cls(high.mask << low.size | low.mask, high.size + low.size)

    def count(self):
        """Number of selected positions."""
        return bin(self.mask).count("1")

    def positions(self):
        """Selected universe positions, ascending."""
        return [i for i in range(self.size) if self.mask >> i & 1]

    def to_array(self):
        """Boolean numpy vector of length `size`."""
        return np.array([bool(self.mask >> i & 1) for i in range(self.size)])

    def __contains__(self, position):
        return 0 <= position < self.size and bool(self.mask >> position & 1)

    def __len__(self):
        return self.count()

    def __iter__(self):
        return iter(self.positions())

    def __eq__(self, other):
        if not isinstance(other, Selection):
            return NotImplemented
        return self.mask == other.mask and self.size == other.size

    def __hash__(self):
        return hash((self.mask, self.size))

    def __repr__(self):
        return f"Selection(0b{self.mask:0{self.size}b}, size={self.size})"
