"""
Bounded decomposition of a target quantum number over several sequences.

Given sequences ``qns_1 .. qns_m`` and signs ``s_1 .. s_m``, find tuples of
flat positions ``(i_1, .., i_m)`` such that

    sum_j s_j * value(qns_j, i_j) == target.

Two interchangeable strategies are provided:

- BRUTEFORCE : deterministic enumeration of the Cartesian product of flat
               positions in lexicographic order (first factor outermost); the
               first ``nmax`` solutions are returned.
- MONTECARLO : uniform random sampling of position tuples (with replacement),
               keeping distinct solutions until ``nmax`` are found or the
               sampling budget is exhausted. Best effort: no completeness or
               ordering guarantee.

In both cases ``nmax`` is the only resource bound; an unreachable target gives
an empty list.

-----------------------------------------------------
File        : QAN/Numbers/decomposition.py
Description : Exhaustive and randomized decomposition solver.
Author      : Maksymilian Kliczkowski
Date        : 2025-11-07
-----------------------------------------------------
"""

import  logging
import  numpy       as np
from    typing      import Dict, List, Optional, Sequence, Tuple, Union
from    enum        import Enum

from    QAN.qan_globals             import get_logger, get_numpy_rng
from    QAN.qan_config              import DecompositionConfig, DEFAULT_DECOMPOSITION, UNSET, Unset
from    QAN.Numbers.base            import QuantumNumber, QuantumNumberSpec, check_signs, check_specs
from    QAN.Numbers.sequence        import AbelianNumberSequence
from    QAN.Numbers.algebra         import as_sequence
from    QAN.Numbers.jit.sequence_jit import bruteforce_decompose_jit

####################################################################################################
#! Strategies
####################################################################################################

class DecompositionMethod(Enum):
    """
    Strategy of :func:`decompose`.
    """

    BRUTEFORCE  = "bruteforce"
    MONTECARLO  = "montecarlo"

    def __str__(self):
        return self.value

    @classmethod
    def from_string(cls, s: Union[str, "DecompositionMethod"]) -> "DecompositionMethod":
        """Convert string to DecompositionMethod."""
        if isinstance(s, DecompositionMethod):
            return s
        for member in cls:
            if member.value == str(s).lower():
                return member
        raise ValueError(f"Unknown decomposition method: {s}. Valid methods: {[m.value for m in cls]}")

####################################################################################################
#! Kernels
####################################################################################################

def _bruteforce(expanded: List[np.ndarray],
                dims    : np.ndarray,
                signs   : np.ndarray,
                target  : np.ndarray,
                spec    : QuantumNumberSpec,
                nmax    : int) -> List[Tuple[int, ...]]:
    offsets         = np.zeros(len(dims), dtype=np.int64)
    offsets[1:]     = np.cumsum(dims)[:-1]
    values          = np.ascontiguousarray(np.concatenate(expanded, axis=0), dtype=np.int64)
    out, found      = bruteforce_decompose_jit(values, offsets, dims, signs, target, spec.period_array, np.int64(nmax))
    return [tuple(int(i) for i in row) for row in out[:found]]

def _montecarlo(expanded    : List[np.ndarray],
                dims        : np.ndarray,
                signs       : np.ndarray,
                target      : np.ndarray,
                spec        : QuantumNumberSpec,
                nmax        : int,
                budget      : int,
                batch_size  : int,
                rng         : np.random.Generator) -> Tuple[List[Tuple[int, ...]], int]:
    '''
    Draw position tuples in vectorized batches. Returns (solutions, number of draws).
    '''
    found   : Dict[Tuple[int, ...], None]   = {}
    m       = len(dims)
    drawn   = 0
    while drawn < budget and len(found) < nmax:
        size    = min(batch_size, budget - drawn)
        idx     = rng.integers(0, dims, size=(size, m))
        total   = np.zeros((size, target.shape[0]), dtype=np.int64)
        for j in range(m):
            total += signs[j] * expanded[j][idx[:, j]]
        total   = spec.reduce_array(total)
        drawn  += size
        for hit in np.flatnonzero(np.all(total == target, axis=1)):
            key = tuple(int(i) for i in idx[hit])
            if key not in found:
                found[key] = None
                if len(found) == nmax:
                    break
    return list(found), drawn

####################################################################################################
#! Public API
####################################################################################################

def decompose(target        : QuantumNumber,
            *sequences      : Union[AbelianNumberSequence, QuantumNumber],
            signs           : Optional[Sequence[int]]       = None,
            nmax            : Optional[int]                 = None,
            method          : Optional[Union[str, DecompositionMethod]] = None,
            rng             : Optional[np.random.Generator] = None,
            seed            : Union[int, None, Unset]       = UNSET,
            max_samples     : Union[int, None, Unset]       = UNSET,
            batch_size      : Optional[int]                 = None,
            config          : Optional[DecompositionConfig] = None,
            logger          : Optional[logging.Logger]      = None) -> List[Tuple[int, ...]]:
    """
    Find up to ``nmax`` tuples of flat positions whose signed sum of values equals ``target``.

    Parameters
    ----------
    target : QuantumNumber
        Quantum number to reach.
    *sequences : AbelianNumberSequence or QuantumNumber
        Factor sequences (a bare quantum number acts as a sequence of dimension 1).
    signs : Sequence[int], optional
        One +1/-1 per sequence, default all +1.
    nmax : int, optional
        Maximal number of solutions (default from ``config``).
    method : str or DecompositionMethod, optional
        ``'bruteforce'`` or ``'montecarlo'`` (default from ``config``).
    rng : np.random.Generator, optional
        Random source of the randomized strategy. Takes precedence over ``seed``.
    seed : int or None, optional
        Seed of a private generator; without ``rng`` and ``seed`` the global
        generator of :mod:`QAN.qan_globals` is used. If not given, the seed of
        ``config`` applies; an explicit ``None`` clears it.
    max_samples : int or None, optional
        Sampling budget of the randomized strategy. If not given, the value of
        ``config`` applies; an explicit ``None`` selects the automatic budget
        derived from the effective ``nmax``.
    batch_size : int, optional
        Tuples drawn per vectorized batch by the randomized strategy.
    config : DecompositionConfig, optional
        Defaults for the options above; explicit keyword arguments win
        (``None`` counts as not given for ``nmax``, ``method`` and ``batch_size``).
    logger : logging.Logger, optional
        Logger, default the global QAN logger.

    Returns
    -------
    List[Tuple[int, ...]]
        Distinct solutions. For ``'bruteforce'`` these are the lexicographically
        first ``nmax``; for ``'montecarlo'`` they are in discovery order and may
        be fewer than ``nmax`` even for reachable targets.
    """
    logger      = logger if logger is not None else get_logger()
    overrides   = {key: val for key, val in dict(method=method, nmax=nmax, batch_size=batch_size).items() if val is not None}
    overrides.update({key: val for key, val in dict(seed=seed, max_samples=max_samples).items() if val is not UNSET})
    config      = (config if config is not None else DEFAULT_DECOMPOSITION).with_override(**overrides)
    strategy    = DecompositionMethod.from_string(config.method)

    if not isinstance(target, QuantumNumber):
        raise TypeError(f"The target must be a QuantumNumber, got {type(target).__name__}.")
    if not sequences:
        raise ValueError("decompose requires at least one sequence.")
    factors     = [as_sequence(seq) for seq in sequences]
    signs       = check_signs(signs, len(factors))
    spec        = target.spec
    for seq in factors:
        if seq.spec is not None:
            check_specs(spec, seq.spec)

    nmax        = int(config.nmax)
    if nmax < 0:
        raise ValueError(f"nmax must be non-negative, got {nmax}.")
    dims        = np.array([seq.dimension for seq in factors], dtype=np.int64)
    if nmax == 0 or np.any(dims == 0):
        return []

    expanded    = [seq.expanded_array() for seq in factors]
    target_arr  = np.array(target.values(), dtype=np.int64)
    sign_arr    = np.array(signs, dtype=np.int64)
    logger.debug(f"Decomposing {target} over {len(factors)} sequences "
                f"(space size {float(np.prod(dims.astype(np.float64))):.3g}) with {strategy}, nmax={nmax}")

    if strategy is DecompositionMethod.BRUTEFORCE:
        result = _bruteforce(expanded, dims, sign_arr, target_arr, spec, nmax)
    else:
        if rng is None:
            rng = np.random.default_rng(config.seed) if config.seed is not None else get_numpy_rng()
        budget          = config.sample_budget()
        result, drawn   = _montecarlo(expanded, dims, sign_arr, target_arr, spec, nmax,
                                    budget, max(1, int(config.batch_size)), rng)
        if len(result) < nmax:
            logger.info(f"Sampling budget exhausted after {drawn} draws with {len(result)}/{nmax} solutions for {target}")

    logger.debug(f"Found {len(result)} solutions for {target}")
    return result

####################################################################################################

__all__ = [
    'DecompositionMethod',
    'decompose',
]
