"""
QAN Session Management
=====================

This module provides a small API for configuring a QAN session: the seed of
the global random generator (used by the randomized decomposition) and the
verbosity of the global logger.

Usage
-----
    import QAN

    # Using context manager (recommended)
    with QAN.run(seed=42, log_level='DEBUG') as session:
        # QAN code here
        ...

    # Or creating a session object
    session = QAN.QANSession(seed=123)
    session.start()
    # ...
    session.stop()
"""

import logging
from typing import Optional, Union

from .qan_globals import get_logger, reseed_all

class QANSession:
    """
    Manages the configuration of a QAN session.

    Parameters
    ----------
    seed : int, optional
        Seed of the global NumPy generator. Default is 42; ``None`` draws fresh entropy.
    log_level : int or str, optional
        Level of the global logger while the session is active. ``None`` keeps the current level.

    Examples
    --------
    >>> session = QANSession(seed=123, log_level='INFO')
    >>> session.start()
    >>> # ... run code ...
    >>> session.stop()
    """

    def __init__(self,
                 seed: Optional[int] = 42,
                 log_level: Optional[Union[int, str]] = None):
        self._seed = seed
        self._log_level = log_level.upper() if isinstance(log_level, str) else log_level
        self._log = get_logger()
        self._previous_level: Optional[int] = None
        self.rng = None

    def start(self) -> 'QANSession':
        """
        Apply the session configuration to the global state.

        Returns
        -------
        QANSession
            The started session instance.
        """
        if self._log_level is not None:
            self._previous_level = self._log.level
            self._log.setLevel(self._log_level)
        self._log.info(f"Starting QANSession(seed={self._seed}, log_level={logging.getLevelName(self._log.level)})")
        self.rng = reseed_all(self._seed)
        return self

    def stop(self):
        """
        End the session and restore the previous logger level.
        """
        self._log.info("Stopping QANSession")
        if self._previous_level is not None:
            self._log.setLevel(self._previous_level)
            self._previous_level = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

def run(seed: Optional[int] = 42,
        log_level: Optional[Union[int, str]] = None) -> QANSession:
    """
    Context manager to run a block of code with a specific QAN configuration.

    Parameters
    ----------
    seed : int, optional
        Seed of the global generator. Default 42.
    log_level : int or str, optional
        Logger level inside the block.

    Returns
    -------
    QANSession
        The session object (not yet started; ``with`` starts it).

    Examples
    --------
    >>> import QAN
    >>> with QAN.run(seed=123):
    ...     # randomized decompositions are reproducible here
    ...     pass
    """
    return QANSession(seed=seed, log_level=log_level)
