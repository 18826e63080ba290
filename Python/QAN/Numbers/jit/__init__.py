"""
Numba kernels used by the compressed-sequence container and the decomposition solver.
"""

from QAN.Numbers.jit.sequence_jit import (
    find_block_jit,
    find_blocks_jit,
    bruteforce_decompose_jit,
)

__all__ = [
    'find_block_jit',
    'find_blocks_jit',
    'bruteforce_decompose_jit',
]
