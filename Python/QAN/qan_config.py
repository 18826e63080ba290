"""
Declarative configuration helpers for the decomposition solver.

The :class:`DecompositionConfig` dataclass packages the knobs of
:func:`~QAN.Numbers.decomposition.decompose` so that higher-level code, tests
or notebooks can assemble re-usable recipes and apply small overrides (e.g.
switching the strategy or fixing a seed).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

####################################################################################################

DEFAULT_NMAX            = 20
DEFAULT_BATCH_SIZE      = 4096
MIN_SAMPLE_BUDGET       = 10_000
SAMPLES_PER_SOLUTION    = 1_000

class Unset:
    """
    Marker of an option that was not given, for options where ``None`` is a
    meaningful value (``seed=None`` selects the global generator,
    ``max_samples=None`` the automatic budget).
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

UNSET = Unset()

@dataclass(frozen=True)
class DecompositionConfig:
    """
    Declarative description of a decomposition run.

    Parameters
    ----------
    method : str
        ``'bruteforce'`` (exhaustive, lexicographic) or ``'montecarlo'`` (randomized).
    nmax : int
        Maximal number of solutions to collect.
    max_samples : int, optional
        Number of random tuples the randomized strategy may draw. ``None`` means
        ``max(MIN_SAMPLE_BUDGET, SAMPLES_PER_SOLUTION * nmax)``.
    batch_size : int
        Number of tuples drawn per vectorized batch by the randomized strategy.
    seed : int, optional
        Seed for a private generator. ``None`` uses the global generator.
    """

    method: str = "bruteforce"
    nmax: int = DEFAULT_NMAX
    max_samples: Optional[int] = None
    batch_size: int = DEFAULT_BATCH_SIZE
    seed: Optional[int] = None

    def with_override(self, **updates: Any) -> "DecompositionConfig":
        """
        Return a new config instance with selected fields replaced.
        """
        return replace(self, **updates)

    def sample_budget(self) -> int:
        """
        Return the effective sampling budget of the randomized strategy.
        """
        if self.max_samples is not None:
            return int(self.max_samples)
        return max(MIN_SAMPLE_BUDGET, SAMPLES_PER_SOLUTION * int(self.nmax))

    def to_kwargs(self) -> Dict[str, Any]:
        """
        Materialise the configuration as a kwargs dictionary suitable for
        passing to :func:`~QAN.Numbers.decomposition.decompose`.

        ``max_samples`` is passed as stored: ``None`` keeps the automatic
        budget, recomputed from the ``nmax`` in effect for the call.
        """
        return {
            "method": self.method,
            "nmax": self.nmax,
            "max_samples": self.max_samples,
            "batch_size": self.batch_size,
            "seed": self.seed,
        }

DEFAULT_DECOMPOSITION = DecompositionConfig()

__all__ = [
    "DecompositionConfig",
    "DEFAULT_DECOMPOSITION",
    "UNSET",
    "Unset",
]
