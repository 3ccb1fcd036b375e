"""
Matrix helpers: subsetting, direct inversion and the rank-1 update.

The dense primitives come straight from numpy/scipy; this module only adds
the pieces that know about position maps, plus the Sherman-Morrison
formula used by the incremental engine.
"""

import numpy as np
from scipy import linalg


def random_universe(size, rng=None):
    """Square matrix with entries uniform in [-1, 1)."""
    rng = np.random.default_rng(rng)
    return rng.uniform(-1.0, 1.0, size=(size, size))


def row_map(m, r, column_map):
    """Row r of m restricted to the columns listed in column_map."""
    return m[r, column_map]


def col_map(m, c, row_map):
    """Column c of m restricted to the rows listed in row_map."""
    return m[row_map, c]


def submatrix(m, positions):
    """The square submatrix of m on the rows and columns `positions`."""
    positions = np.asarray(positions, dtype=np.int64)
    return m[np.ix_(positions, positions)]


def direct_inverse(m):
    """Direct (LAPACK) inverse of a square matrix."""
    return linalg.inv(m, check_finite=False)


def all_finite(m):
    """True if no entry is inf or nan."""
    return bool(np.isfinite(m).all())


def sherman_morrison_update(inv, u, v, out=None):
    """
    Calculate (A + u v)^-1 given inv = A^-1.

    See Sherman, Jack; Morrison, Winifred J. (1949). "Adjustment of an
    Inverse Matrix Corresponding to Changes in the Elements of a Given
    Column or a Given Row of the Original Matrix". Annals of Mathematical
    Statistics. 20: 621.

    Parameters
    ----------
    inv : numpy.ndarray, shape (k, k)
        Inverse of the current matrix A.
    u : numpy.ndarray, shape (k,)
        Column vector of the rank-1 perturbation.
    v : numpy.ndarray, shape (k,)
        Row vector of the rank-1 perturbation.
    out : numpy.ndarray, optional
        Where to write the result; may be `inv` itself.

    Returns
    -------
    numpy.ndarray
        The updated inverse. No check is made on the denominator
        1 + v inv u; a vanishing one yields non-finite entries.
    """
    inv_u = inv @ u
    v_inv = v @ inv
    denom = 1.0 + v_inv @ u
    return np.subtract(inv, np.outer(inv_u, v_inv) / denom, out=out)
