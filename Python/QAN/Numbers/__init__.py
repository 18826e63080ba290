"""
Abelian quantum numbers and compressed quantum-number sequences.

This module provides the bookkeeping used to index block-structured state
spaces of many-body systems:
- Quantum-number values with per-component periods (Z and Z_p factors)
- Compressed sequences of quantum numbers with sort-form invariants
- Sequence algebra (sort, filter, permute, direct sum, tensor product)
- Bounded decomposition of a target over several sequences
- Concrete families (spin, particle number, crystal momenta)

---------------------------------------------------
File        : QAN/Numbers/__init__.py
Description : Quantum-number core module initialization
Author      : Maksymilian Kliczkowski
Date        : 2025-11-04
---------------------------------------------------
"""

# Errors
from QAN.Numbers.errors import (
    QuantumNumberError,
    ArityMismatch,
    IncompatiblePeriod,
    InvalidSequenceLayout,
)

# Values
from QAN.Numbers.base import (
    INF,
    QuantumNumberSpec,
    QuantumNumber,
    combine,
    regularize,
)

# Sequences
from QAN.Numbers.sequence import (
    SortForm,
    AbelianNumberSequence,
)

# Algebra
from QAN.Numbers.algebra import (
    sort_sequence,
    filter_sequence,
    permute_sequence,
    find_all,
    union,
    kron,
    prod,
)

# Decomposition
from QAN.Numbers.decomposition import (
    DecompositionMethod,
    decompose,
)

# Concrete families
from QAN.Numbers.concrete import (
    Sz,
    ParticleNumber,
    SpinfulParticle,
    Momentum1,
    Momentum2,
    Momentum3,
)
from QAN.Numbers.momenta import Momenta

####################################################################################################
# Public API
####################################################################################################

__all__ = [
    # Errors
    'QuantumNumberError',
    'ArityMismatch',
    'IncompatiblePeriod',
    'InvalidSequenceLayout',

    # Values
    'INF',
    'QuantumNumberSpec',
    'QuantumNumber',
    'combine',
    'regularize',

    # Sequences
    'SortForm',
    'AbelianNumberSequence',

    # Algebra
    'sort_sequence',
    'filter_sequence',
    'permute_sequence',
    'find_all',
    'union',
    'kron',
    'prod',

    # Decomposition
    'DecompositionMethod',
    'decompose',

    # Families
    'Sz',
    'ParticleNumber',
    'SpinfulParticle',
    'Momentum1',
    'Momentum2',
    'Momentum3',
    'Momenta',
    'get_available_families',
]

####################################################################################################
# Convenience function for getting available families
####################################################################################################

def get_available_families():
    """
    Get the predefined quantum-number families.

    Returns
    -------
    dict
        Dictionary mapping family names to descriptors (or descriptor factories
        for the momentum families).
    """
    return {
        'Sz'                : Sz,
        'ParticleNumber'    : ParticleNumber,
        'SpinfulParticle'   : SpinfulParticle,
        'Momentum1'         : Momentum1,
        'Momentum2'         : Momentum2,
        'Momentum3'         : Momentum3,
    }
