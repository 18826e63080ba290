"""
QAN package initialization
=========================

Quantum Abelian Numbers (QAN): bookkeeping of conserved Abelian quantum numbers
for block-structured many-body state spaces.

This is the top-level package for QAN. It provides unified access to the
quantum-number core, the global singletons and the session helpers.

Usage
-----
Import QAN and its submodules:

    import QAN
    from QAN import QuantumNumberSpec, AbelianNumberSequence, decompose

    log     = QAN.get_logger()
    with QAN.run(seed=42):
        ...

----------------------------------------------------------
Author          : Maks Kliczkowski
Email           : maxgrom97@gmail.com
Date            : 04.11.2025
Description     : Quantum Abelian Numbers: compressed quantum-number sequences and their algebra.
----------------------------------------------------------
"""

__version__         = "0.1.0"
__author__          = "Maksymilian Kliczkowski"
__email__           = "maksymilian.kliczkowski@pwr.edu.pl"
__license__         = "MIT"
__description__     = "Quantum Abelian Numbers: compressed quantum-number sequences and their algebra"

__all__ = [
    # --- Convenience API exports (lazy) ---
    # Values
    "QuantumNumberSpec",
    "QuantumNumber",
    "regularize",
    # Sequences
    "SortForm",
    "AbelianNumberSequence",
    # Algebra
    "sort_sequence",
    "filter_sequence",
    "permute_sequence",
    "find_all",
    "union",
    "kron",
    "prod",
    "decompose",
    # Families
    "Momenta",
    # Configuration
    "DecompositionConfig",
    "QANSession",
    "run",
    # Global accessor re-exports
    "get_logger",
    "set_log_level",
    "get_numpy_rng",
    "reseed_all",
    # Meta
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__description__",
]

####################################################################################################

import importlib
from typing import Any, Dict

# Centralized globals (lazy singletons)
from .qan_globals import (
    get_logger,
    set_log_level,
    get_numpy_rng,
    reseed_all,
)

# ----------------------------------------------------------------------------
# Lazy access to subpackages and common classes (keeps `import QAN` light)
# ----------------------------------------------------------------------------

_SUBMODULES: Dict[str, str] = {
    'Numbers'               : 'QAN.Numbers',
}

_API_EXPORTS: Dict[str, str] = {
    'QuantumNumberSpec'     : 'QAN.Numbers.base',
    'QuantumNumber'         : 'QAN.Numbers.base',
    'regularize'            : 'QAN.Numbers.base',
    'SortForm'              : 'QAN.Numbers.sequence',
    'AbelianNumberSequence' : 'QAN.Numbers.sequence',
    'sort_sequence'         : 'QAN.Numbers.algebra',
    'filter_sequence'       : 'QAN.Numbers.algebra',
    'permute_sequence'      : 'QAN.Numbers.algebra',
    'find_all'              : 'QAN.Numbers.algebra',
    'union'                 : 'QAN.Numbers.algebra',
    'kron'                  : 'QAN.Numbers.algebra',
    'prod'                  : 'QAN.Numbers.algebra',
    'decompose'             : 'QAN.Numbers.decomposition',
    'Momenta'               : 'QAN.Numbers.momenta',
    'DecompositionConfig'   : 'QAN.qan_config',
    'QANSession'            : 'QAN.session',
    'run'                   : 'QAN.session',
}

def __getattr__(name: str) -> Any:  # PEP 562
    if name in _SUBMODULES:
        return importlib.import_module(_SUBMODULES[name])
    if name in _API_EXPORTS:
        mod = importlib.import_module(_API_EXPORTS[name])
        return getattr(mod, name)
    raise AttributeError(f"module 'QAN' has no attribute {name!r}")

def __dir__():
    return sorted(list(globals().keys()) + list(_SUBMODULES.keys()) + list(_API_EXPORTS.keys()))

# -------------------------------------------------------------------------------------------------
#! End of QAN package initialization
# -------------------------------------------------------------------------------------------------
