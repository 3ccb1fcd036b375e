"""
Gray Fast: Numba JIT-compiled kernels for the combination scan.

The enumerator walks raw indices one at a time and keeps only those whose
Gray code has the requested number of set bits. That scan is the hot loop
of the generator, so it lives here as compiled code.

All kernels take and return plain int64 values; universes are therefore
limited to MAX_UNIVERSE items so that 2**size still fits.
"""

import numpy as np
from numba import njit

from grayinv.selection import MAX_UNIVERSE


# ============================================================
# Bit primitives
# ============================================================

@njit(cache=True)
def gray_code(x):
    """Binary to reflected Gray code."""
    return x ^ (x >> 1)


@njit(cache=True)
def popcount(x):
    """Number of set bits in a non-negative integer."""
    count = 0
    while x:
        count += x & 1
        x >>= 1
    return count


# ============================================================
# Scan kernels: next/previous index with `pick` bits in its code
# ============================================================

@njit(cache=True)
def scan_forward(index, size, pick):
    """Find the next raw index whose Gray code has `pick` set bits.

    Parameters
    ----------
    index : int64
        Current raw index.
    size : int
        Universe size; the scan stops at 2**size.
    pick : int
        Required population count.

    Returns
    -------
    next_index : int64
        The index found, or `index` unchanged if the bound was reached.
    turned : bool
        True if the scan reached 2**size without finding a valid index.
    """
    bound = np.int64(1) << size
    next_index = index
    while True:
        next_index += 1
        if next_index == bound:
            return index, True
        if popcount(gray_code(next_index)) == pick:
            return next_index, False


@njit(cache=True)
def scan_reverse(index, pick):
    """Find the previous raw index whose Gray code has `pick` set bits.

    Mirror of scan_forward; the lower bound is index 0, which never holds
    a valid code because gray(0) is empty.
    """
    next_index = index
    while True:
        next_index -= 1
        if next_index == 0:
            return index, True
        if popcount(gray_code(next_index)) == pick:
            return next_index, False


def warmup():
    """Trigger JIT compilation with a small dummy call.

    Call this once before timing anything to keep compilation overhead
    out of the first measured iteration.
    """
    index, _ = scan_forward(np.int64(0), 3, 2)
    scan_reverse(index, 2)
