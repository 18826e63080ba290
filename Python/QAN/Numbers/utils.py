"""
Shared utilities for validating integral inputs and option strings.

The helper functions defined here are used across the quantum-number,
sequence and enumeration modules so that integer checks and mode/view
validation behave the same everywhere.

File        : QAN/Numbers/utils.py
Author      : Maksymilian Kliczkowski
Email       : maxgrom97@gmail.com
"""

from __future__ import annotations
from typing import Any, Tuple

import numpy as np

__all__ = [
    "is_integral",
    "as_int",
    "check_choice",
]

def is_integral(value: Any) -> bool:
    """
    Return True for python / numpy integers (booleans excluded).
    """
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))

def as_int(value: Any) -> int:
    """
    Convert an integral input to a python int, refusing non-integral reals.
    """
    if is_integral(value):
        return int(value)
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return int(value)
    raise ValueError(f"Quantum-number components must be integers, got {value!r}. Use `regularize` for real inputs.")

def check_choice(value: str, allowed: Tuple[str, ...], what: str) -> str:
    """
    Return ``value`` if it is one of ``allowed``, otherwise raise ValueError naming ``what``.
    """
    if value not in allowed:
        raise ValueError(f"Unknown {what}: {value!r}. Valid choices: {list(allowed)}")
    return value
