"""
Enumeration of all quantum numbers of a finite family.

For a family whose components all have finite periods ``(p_1, .., p_k)`` (e.g.
the crystal momenta of a periodic lattice) :class:`Momenta` is the lazy,
finite and restartable collection of every valid tuple in mixed-radix
lexicographic order, together with the dense index bijection

    index(c_1, .., c_k) = sum_i c_i * prod_{j>i} p_j.

Example
-------
>>> momenta = Momenta(Momentum2(2, 3))
>>> list(momenta)[:3]
[Momentum2(0, 0), Momentum2(0, 1), Momentum2(0, 2)]
>>> momenta.index(Momentum2(2, 3)(1, 1))
4

---------------------------------------------------
File        : QAN/Numbers/momenta.py
Description : Mixed-radix enumeration of finite quantum-number families.
Author      : Maksymilian Kliczkowski
Date        : 2025-11-07
---------------------------------------------------
"""

import  numpy       as np
from    typing      import Iterator, Optional, Tuple
from    itertools   import product

from    QAN.Numbers.base        import QuantumNumber, QuantumNumberSpec, check_specs
from    QAN.Numbers.utils       import is_integral
from    QAN.Numbers.sequence    import AbelianNumberSequence, SortForm

class Momenta:
    """
    All quantum numbers of a family with finite periods.

    Parameters
    ----------
    spec : QuantumNumberSpec
        Family to enumerate; every period must be finite.
    """

    __slots__ = ('_spec', '_shape')

    def __init__(self, spec: QuantumNumberSpec):
        if not isinstance(spec, QuantumNumberSpec):
            raise TypeError(f"Expected a QuantumNumberSpec, got {type(spec).__name__}.")
        if not spec.is_finite:
            raise ValueError(f"Cannot enumerate {spec.name}: every period must be finite, got {spec.periods}.")
        self._spec  = spec
        self._shape = tuple(int(p) for p in spec.periods)

    @property
    def spec(self) -> QuantumNumberSpec:
        return self._spec

    @property
    def shape(self) -> Tuple[int, ...]:
        ''' Periods of the family, i.e. the radices of the index. '''
        return self._shape

    def __len__(self) -> int:
        return int(np.prod(self._shape, dtype=np.int64))

    def __iter__(self) -> Iterator[QuantumNumber]:
        for values in product(*(range(p) for p in self._shape)):
            yield QuantumNumber._from_reduced(self._spec, values)

    def __getitem__(self, i: int) -> QuantumNumber:
        if not is_integral(i):
            raise TypeError(f"Momenta indices must be integers, got {type(i).__name__}.")
        n = len(self)
        if not -n <= i < n:
            raise IndexError(f"Index {i} out of range for {n} momenta.")
        values = np.unravel_index(int(i) % n, self._shape)
        return QuantumNumber._from_reduced(self._spec, tuple(int(v) for v in values))

    def index(self, qn: QuantumNumber) -> int:
        ''' Dense mixed-radix index of ``qn``. '''
        check_specs(self._spec, qn.spec)
        return int(np.ravel_multi_index(qn.values(), self._shape))

    def __contains__(self, qn) -> bool:
        return isinstance(qn, QuantumNumber) and qn.spec == self._spec

    def to_sequence(self, counts: Optional[np.ndarray] = None) -> AbelianNumberSequence:
        """
        Canonical sequence with one block per momentum (mixed-radix order is ascending).

        ``counts`` gives the multiplicity of every momentum (default 1 each).
        """
        return AbelianNumberSequence(SortForm.CANONICAL, list(self), counts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Momenta):
            return NotImplemented
        return self._spec == other._spec

    def __hash__(self) -> int:
        return hash((Momenta, self._spec))

    def __repr__(self) -> str:
        return f"Momenta({self._spec.name}{list(self._shape)})"

__all__ = ['Momenta']
