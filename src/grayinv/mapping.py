"""
Index Mapping: universe positions <-> local submatrix slots.

The active submatrix stores the selected rows/columns of the universe
matrix in k local slots. `forward[u]` is the slot of universe position u
(UNASSIGNED when u is not selected) and `backward[p]` is the universe
position held in slot p.

A replacement keeps every slot in place except one: the slot that held the
removed item is handed to the added item. This is what lets the inverse be
updated with a row and a column replacement at a single slot.
"""

import numpy as np

from grayinv.selection import Selection

UNASSIGNED = np.iinfo(np.int64).max


class ReplacementError(AssertionError):
    """Two consecutive selections do not differ by a single replacement."""


class IndexMapping:
    """
    Bidirectional map between a Selection and local slots 0..pick-1.

    Parameters
    ----------
    size : int
        Universe size (n).
    positions : sequence of int
        Selected universe positions; slot i is assigned to positions[i].
    """

    def __init__(self, size, positions):
        self.size = size
        self.pick = len(positions)
        self.forward = np.full(size, UNASSIGNED, dtype=np.int64)
        self.backward = np.empty(self.pick, dtype=np.int64)
        for slot, pos in enumerate(positions):
            if self.forward[pos] != UNASSIGNED:
                raise ValueError(f"Position {pos} assigned twice")
            self.forward[pos] = slot
            self.backward[slot] = pos

    @classmethod
    def from_selection(cls, selection):
        """Assign slots to the selected positions in ascending order."""
        return cls(selection.size, selection.positions())

    @staticmethod
    def diff(previous, new):
        """
        Find the single item replaced between two selections.

        Parameters
        ----------
        previous, new : Selection
            Consecutive selections of the same universe.

        Returns
        -------
        (removed, added) : tuple of int
            Universe positions that left and entered the selection.

        Raises
        ------
        ReplacementError
            Unless exactly one bit is cleared and exactly one bit is set.
        """
        if previous.size != new.size:
            raise ReplacementError(
                f"Universe sizes differ: {previous.size} vs {new.size}")
        removed_mask = previous.mask & ~new.mask
        added_mask = new.mask & ~previous.mask
        if bin(removed_mask).count("1") != 1 or bin(added_mask).count("1") != 1:
            raise ReplacementError(
                f"Not a single replacement: {previous!r} -> {new!r}")
        return removed_mask.bit_length() - 1, added_mask.bit_length() - 1

    def local(self, position):
        """Slot of a selected universe position."""
        slot = self.forward[position]
        if slot == UNASSIGNED:
            raise KeyError(f"Position {position} is not selected")
        return int(slot)

    def replace(self, removed, added):
        """
        Hand the slot of `removed` over to `added`.

        Returns
        -------
        int
            The slot that changed owner.
        """
        slot = self.forward[removed]
        if slot == UNASSIGNED:
            raise ReplacementError(f"Removed position {removed} is not selected")
        if self.forward[added] != UNASSIGNED:
            raise ReplacementError(f"Added position {added} is already selected")
        self.forward[removed] = UNASSIGNED
        self.forward[added] = slot
        self.backward[slot] = added
        return int(slot)

    def selection(self):
        """The current selection as a Selection."""
        return Selection.from_positions(self.backward.tolist(), self.size)

    def is_consistent(self):
        """Check backward[forward[u]] == u for every selected u and vice versa."""
        assigned = np.flatnonzero(self.forward != UNASSIGNED)
        if len(assigned) != self.pick:
            return False
        for pos in assigned:
            slot = self.forward[pos]
            if not 0 <= slot < self.pick or self.backward[slot] != pos:
                return False
        return bool(np.array_equal(np.sort(self.backward), assigned))

    def __repr__(self):
        return (f"IndexMapping(size={self.size}, "
                f"backward={self.backward.tolist()})")
