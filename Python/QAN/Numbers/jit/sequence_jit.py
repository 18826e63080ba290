'''
JIT kernels for compressed quantum-number sequences.

- guess-accelerated block search over a boundary (indptr) array,
- exhaustive odometer over the flat positions of several sequences.

Quantum numbers enter the kernels as int64 arrays of shape (n, arity); periods
as an int64 array where 0 marks an unbounded component.

---------------------------
Author          : Maksymilian Kliczkowski
Date            : 2025-11-05
License         : MIT
---------------------------
'''

import  numba
import  numpy   as np
from    typing  import Tuple

# --------------------------------------------------------------------------
#! Block search
# --------------------------------------------------------------------------

@numba.njit(cache=True)
def _last_start_not_after(indptr: np.ndarray, position: np.int64, left: np.int64, right: np.int64) -> np.int64:
    """
    Largest block b in [left, right] with indptr[b] <= position.
    Assumes indptr[left] <= position.
    """
    while left < right:
        mid = (left + right + 1) // 2
        if indptr[mid] <= position:
            left    = mid
        else:
            right   = mid - 1
    return left

@numba.njit(cache=True)
def find_block_jit(indptr: np.ndarray, position: np.int64, guess: np.int64) -> np.int64:
    """
    Index of the block whose range contains ``position``.

    Starts at ``guess``; if the position lies left of it, binary-searches the
    blocks [0, guess), if right of it the blocks (guess, n). The result does not
    depend on the guess, only the cost does.

    Args:
        indptr:
            Boundary array of length n + 1, strictly increasing, starting at 0.
        position:
            Flat position, 0 <= position < indptr[-1].
        guess:
            Initial block, 0 <= guess < n.
    """
    n = indptr.shape[0] - 1
    if position < indptr[guess]:
        return _last_start_not_after(indptr, position, np.int64(0), guess - 1)
    if position >= indptr[guess + 1]:
        return _last_start_not_after(indptr, position, guess + 1, np.int64(n - 1))
    return guess

@numba.njit(cache=True)
def find_blocks_jit(indptr: np.ndarray, positions: np.ndarray) -> np.ndarray:
    """
    Vectorized :func:`find_block_jit`; each lookup is guessed from the previous
    answer so sorted or sequential positions cost O(1) each.
    """
    out     = np.empty(positions.shape[0], dtype=np.int64)
    guess   = np.int64(0)
    for i in range(positions.shape[0]):
        guess   = find_block_jit(indptr, positions[i], guess)
        out[i]  = guess
    return out

# --------------------------------------------------------------------------
#! Exhaustive decomposition
# --------------------------------------------------------------------------

@numba.njit(cache=True)
def bruteforce_decompose_jit(values     : np.ndarray,   # (sum(dims), arity) expanded values of all factors
                            offsets     : np.ndarray,   # (m,) row offset of every factor in values
                            dims        : np.ndarray,   # (m,) dimension of every factor
                            signs       : np.ndarray,   # (m,) +1 / -1
                            target      : np.ndarray,   # (arity,) regularized target
                            periods     : np.ndarray,   # (arity,) 0 = unbounded
                            nmax        : np.int64) -> Tuple[np.ndarray, np.int64]:
    """
    Enumerate tuples of flat positions in lexicographic order (first factor
    outermost) and collect the first ``nmax`` whose signed sum equals ``target``.

    Returns:
        (solutions, found) where only the first ``found`` rows of ``solutions`` are valid.
    """
    m       = dims.shape[0]
    arity   = target.shape[0]
    out     = np.zeros((max(nmax, 0), m), dtype=np.int64)
    found   = np.int64(0)
    if nmax <= 0:
        return out, found
    for j in range(m):
        if dims[j] == 0:
            return out, found

    # partial[j, c] = signed sum of factors 0..j-1 at the current positions
    idx     = np.zeros(m, dtype=np.int64)
    partial = np.zeros((m + 1, arity), dtype=np.int64)
    level   = 0

    while True:
        # refresh partial sums from the first changed level downwards
        for j in range(level, m):
            row = offsets[j] + idx[j]
            for c in range(arity):
                partial[j + 1, c] = partial[j, c] + signs[j] * values[row, c]

        ok = True
        for c in range(arity):
            s = partial[m, c]
            p = periods[c]
            if p > 0:
                s = ((s % p) + p) % p
            if s != target[c]:
                ok = False
                break
        if ok:
            for j in range(m):
                out[found, j] = idx[j]
            found += 1
            if found == nmax:
                break

        # advance the odometer, last factor fastest
        j = m - 1
        while j >= 0:
            idx[j] += 1
            if idx[j] < dims[j]:
                break
            idx[j] = 0
            j -= 1
        if j < 0:
            break
        level = j
    return out, found

# --------------------------------------------------------------------------
#! EOF
# --------------------------------------------------------------------------
