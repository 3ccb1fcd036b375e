"""
Inverse Validation: how good is a maintained inverse?

Analyzes a matrix together with a claimed inverse and returns a report with:
  - Shape and finiteness
  - Residual of M @ M_inv against the identity
  - Relative error against a direct inverse
  - Condition number of M

Usage:
    report = check_inverse(engine.matrix, engine.inverse)
    print(report)
"""

import numpy as np

from grayinv import matrix as _matrix


def check_inverse(m, inv, tol=1e-9):
    """
    Compare a maintained inverse with the directly computed one.

    Parameters
    ----------
    m : numpy.ndarray
        Square matrix.
    inv : numpy.ndarray
        Claimed inverse of m.
    tol : float
        Relative error below which the inverse is accepted.

    Returns
    -------
    dict
        Report with shape, finite, residual, rel_error, cond, ok.
    """
    m = np.asarray(m, dtype=float)
    inv = np.asarray(inv, dtype=float)
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        raise ValueError(f"Matrix must be square, got {m.shape}")
    if inv.shape != m.shape:
        raise ValueError(f"Inverse shape {inv.shape} != matrix shape {m.shape}")

    k = m.shape[0]
    finite = _matrix.all_finite(inv)

    report = {
        "shape": (k, k),
        "finite": finite,
    }

    if not finite:
        report.update(residual=np.inf, rel_error=np.inf, cond=np.inf, ok=False)
        return report

    residual = float(np.abs(m @ inv - np.eye(k)).max())
    direct = _matrix.direct_inverse(m)
    scale = max(float(np.abs(direct).max()), 1.0)
    rel_error = float(np.abs(inv - direct).max()) / scale
    cond = float(np.linalg.cond(m))

    report.update(
        residual=residual,
        rel_error=rel_error,
        cond=round(cond, 3),
        ok=rel_error < tol,
    )
    return report
