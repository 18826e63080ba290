"""
Errors raised by the quantum-number core.

All errors derive from :class:`QuantumNumberError` and from ``ValueError`` so
that callers can either catch the whole family or treat them as ordinary bad
input.

---------------------------------------------------
File        : QAN/Numbers/errors.py
Description : Error hierarchy for quantum numbers and compressed sequences
Author      : Maksymilian Kliczkowski
Date        : 2025-11-04
---------------------------------------------------
"""

####################################################################################################
#! Errors
####################################################################################################

class QuantumNumberError(Exception):
    """
    Base class for quantum-number errors.
    """
    ARITY_MISMATCH          = "Quantum numbers have different arities"
    PERIOD_MISMATCH         = "Quantum numbers carry different periods"
    FAMILY_MISMATCH         = "Quantum numbers belong to different families"
    NOT_STARTING_AT_ZERO    = "The boundary array must start at 0"
    NOT_INCREASING          = "The boundary array must be strictly increasing"
    NOT_POSITIVE_COUNT      = "Every block count must be positive"
    WRONG_LENGTH            = "The number of values does not match the layout"
    DUPLICATED_VALUES       = "Values of a Unique/Canonical sequence must be distinct"
    NOT_SORTED              = "Values of a Canonical sequence must be ascending"

class ArityMismatch(QuantumNumberError, ValueError):
    """
    Operands carry a different number of components.
    """

class IncompatiblePeriod(QuantumNumberError, ValueError):
    """
    The same component carries different periods in two operands.
    """

class InvalidSequenceLayout(QuantumNumberError, ValueError):
    """
    The boundary/count description of a compressed sequence is malformed.
    """

####################################################################################################

__all__ = [
    "QuantumNumberError",
    "ArityMismatch",
    "IncompatiblePeriod",
    "InvalidSequenceLayout",
]
