"""
Centralized global singletons for the QAN package.

This module is the SINGLE place where process-wide shared objects are created.
All other code should import the accessors defined here instead of building
their own loggers or random number generators.

Provided Singletons
-------------------
- Global logger        : via `get_logger()` (a standard `logging.Logger` named "QAN")
- RNG conveniences     : via `get_numpy_rng()` / `reseed_all()`

Usage Pattern
-------------
    from QAN.qan_globals import get_logger, get_numpy_rng, reseed_all

    log     = get_logger()
    rng     = get_numpy_rng()
    reseed_all(123)

Design Notes
------------
The logger level is read once from the ``QAN_LOG_LEVEL`` environment variable
(default ``WARNING``) when the logger is first requested.

!IMPORTANT: Do NOT perform side effects at module import other than creating
!lightweight sentinels; initialization is deferred until first access.
"""

from __future__ import annotations
from typing import Optional, Union
import logging
import os
import threading

import numpy as np

_LOCK                   = threading.Lock()

_LOGGER_NAME            = "QAN"
_LOG_FORMAT             = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LOG_LEVEL_ENV          = "QAN_LOG_LEVEL"

# Internal storage for singletons
_LOGGER: Optional[logging.Logger]       = None
_RNG: Optional[np.random.Generator]     = None

def get_logger() -> logging.Logger:
    """
    Return the process-global logger instance.

    The first call attaches a stream handler and sets the level from the
    ``QAN_LOG_LEVEL`` environment variable.
    """
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER
    with _LOCK:
        if _LOGGER is None:
            logger = logging.getLogger(_LOGGER_NAME)
            if not logger.handlers:
                handler = logging.StreamHandler()
                handler.setFormatter(logging.Formatter(_LOG_FORMAT))
                logger.addHandler(handler)
            logger.setLevel(os.environ.get(_LOG_LEVEL_ENV, "WARNING").upper())
            _LOGGER = logger
    return _LOGGER

def set_log_level(level: Union[int, str]) -> None:
    """Set the level of the global logger (name like ``'DEBUG'`` or a logging constant)."""
    if isinstance(level, str):
        level = level.upper()
    get_logger().setLevel(level)

# ----------------------------------------------------------------

def get_numpy_rng() -> np.random.Generator:
    """Return the global NumPy Generator instance."""
    global _RNG
    if _RNG is not None:
        return _RNG
    with _LOCK:
        if _RNG is None:
            _RNG = np.random.default_rng()
    return _RNG

def reseed_all(seed: Optional[int]) -> np.random.Generator:
    """
    Replace the global NumPy Generator by a freshly seeded one.

    Returns the new generator.
    """
    global _RNG
    with _LOCK:
        _RNG = np.random.default_rng(seed)
    get_logger().debug(f"Global RNG reseeded with seed={seed}")
    return _RNG

# ----------------------------------------------------------------

__all__ = [
    "get_logger",
    "set_log_level",
    "get_numpy_rng",
    "reseed_all",
]

# ----------------------------------------------------------------
#! End of QAN global singletons
