"""
Incremental Inversion Engine.

Keeps the inverse of the active submatrix current while the selection
moves through a minimal-change sequence. Replacing one universe item
means replacing one row and one column of the submatrix at the same slot;
each of those is a rank-1 change, so two Sherman-Morrison updates bring
the inverse up to date in O(k^2) instead of an O(k^3) re-inversion.

Usage:
    join = GrayJoin()
    engine = IncrementalInverse(universe, join.next())
    for _ in range(join.total_combinations() - 1):
        engine.advance(join.next())
"""

import numpy as np

from grayinv.mapping import IndexMapping
from grayinv import matrix as _matrix


class IncrementalInverse:
    """
    Active submatrix of a universe matrix and its maintained inverse.

    Parameters
    ----------
    universe : numpy.ndarray, shape (n, n)
        The full matrix over all items.
    selection : Selection
        Initial selection; its submatrix is inverted directly, once.
    """

    def __init__(self, universe, selection):
        universe = np.asarray(universe, dtype=np.float64)
        if universe.ndim != 2 or universe.shape[0] != universe.shape[1]:
            raise ValueError(f"Universe must be square, got {universe.shape}")
        if universe.shape[0] != selection.size:
            raise ValueError(
                f"Selection over {selection.size} items does not match "
                f"universe of {universe.shape[0]}")

        self.universe = universe
        self.selection = selection
        self.mapping = IndexMapping.from_selection(selection)
        self.matrix = _matrix.submatrix(universe, self.mapping.backward)
        self.inverse = _matrix.direct_inverse(self.matrix)
        self.updates = 0

        self._unit = np.zeros(self.mapping.pick)

    @property
    def pick(self):
        return self.mapping.pick

    def replace(self, removed, added):
        """
        Swap universe item `removed` for `added` and update the inverse.

        Parameters
        ----------
        removed : int
            Selected universe position leaving the selection.
        added : int
            Unselected universe position entering it.

        Returns
        -------
        int
            Local slot whose row and column were replaced.
        """
        slot = self.mapping.replace(removed, added)
        backward = self.mapping.backward
        m = self.matrix
        inv = self.inverse

        new_row = _matrix.row_map(self.universe, added, backward)
        new_col = _matrix.col_map(self.universe, added, backward)

        e = self._unit
        e[slot] = 1.0

        # Row replacement: A + e_p (new_row - row_p)
        v_row = new_row - m[slot, :]
        _matrix.sherman_morrison_update(inv, e, v_row, out=inv)
        m[slot, :] = new_row

        # Column replacement, against the matrix with the new row in place
        u_col = new_col - m[:, slot]
        _matrix.sherman_morrison_update(inv, u_col, e, out=inv)
        m[:, slot] = new_col

        e[slot] = 0.0
        self.selection = self.mapping.selection()
        self.updates += 1
        return slot

    def advance(self, selection):
        """
        Move to the next selection of a minimal-change sequence.

        Returns
        -------
        (removed, added) or None
            The replacement applied; None when the selection is unchanged
            (a turning point of the enumeration).

        Raises
        ------
        ReplacementError
            If the selections differ by more than one replacement.
        """
        if selection == self.selection:
            return None
        removed, added = IndexMapping.diff(self.selection, selection)
        self.replace(removed, added)
        return removed, added

    def is_finite(self):
        """Validity signal: every entry of the inverse is finite."""
        return _matrix.all_finite(self.inverse)

    def direct_inverse(self):
        """Invert the current submatrix from scratch (for comparison)."""
        return _matrix.direct_inverse(self.matrix)

    def __repr__(self):
        return (f"IncrementalInverse(pick={self.pick}, "
                f"selection={self.selection!r}, updates={self.updates})")
