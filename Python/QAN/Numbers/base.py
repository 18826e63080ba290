"""
Abelian quantum numbers.

A quantum number is an immutable tuple of integers ``(c_1, ..., c_k)`` in which
every component carries a period: a positive integer for cyclic symmetries
(e.g. lattice momentum, Z_N charges) or infinity for non-compact ones (e.g.
particle number). The family of a quantum number, i.e. its name, component
names and periods, is described once by a :class:`QuantumNumberSpec` and all
arithmetic is implemented generically over that descriptor.

Example
-------
>>> CNZ4    = QuantumNumberSpec("CNZ4", ("N", "Z"), (math.inf, 4))
>>> qn      = CNZ4(1, 3)
>>> -qn
CNZ4(-1, 1)
>>> qn * 4
CNZ4(4, 0)

--------------------------------------------
File        : QAN/Numbers/base.py
Description : Quantum-number descriptor and value type.
Author      : Maksymilian Kliczkowski
Date        : 2025-11-04
--------------------------------------------
"""

import  math
import  numpy       as np
from    typing      import Iterable, Iterator, Optional, Sequence, Tuple, Union
from    dataclasses import dataclass
from    functools   import cached_property, total_ordering

from    QAN.Numbers.errors import ArityMismatch, IncompatiblePeriod, QuantumNumberError
from    QAN.Numbers.utils  import as_int, is_integral

####################################################################################################

INF                     = math.inf
Period                  = Union[int, float]

# attribute names of QuantumNumber that a component name would be shadowed by
RESERVED_COMPONENT_NAMES = frozenset(('spec', 'periods', 'dimension', 'keys', 'values', 'items', 'replace'))

####################################################################################################
#! Descriptor
####################################################################################################

@dataclass(frozen=True)
class QuantumNumberSpec:
    """
    Static description of a family of Abelian quantum numbers.

    Parameters
    ----------
    name : str
        Family name used for rendering, e.g. ``'CNZ4'``.
    names : Tuple[str, ...]
        Component names, e.g. ``('N', 'Z')``.
    periods : Tuple[int | float, ...]
        One period per component: a positive integer or ``math.inf``.
    """

    name    : str
    names   : Tuple[str, ...]
    periods : Tuple[Period, ...]

    def __post_init__(self):
        names   = tuple(str(n) for n in self.names)
        periods = tuple(self.periods)
        if len(names) != len(periods):
            raise ArityMismatch(f"{ArityMismatch.ARITY_MISMATCH}: {len(names)} names but {len(periods)} periods.")
        if len(set(names)) != len(names):
            raise ValueError(f"Component names must be distinct, got {names}.")
        for n in names:
            if not n.isidentifier() or n.startswith('_') or n in RESERVED_COMPONENT_NAMES:
                raise ValueError(f"Invalid component name {n!r}: names must be public identifiers "
                                f"other than {sorted(RESERVED_COMPONENT_NAMES)}.")

        checked = []
        for p in periods:
            if isinstance(p, (float, np.floating)) and math.isinf(p) and p > 0:
                checked.append(INF)
            elif is_integral(p) or (isinstance(p, (float, np.floating)) and float(p).is_integer()):
                if int(p) <= 0:
                    raise ValueError(f"Periods must be positive, got {p}.")
                checked.append(int(p))
            else:
                raise ValueError(f"Periods must be positive integers or infinity, got {p!r}.")
        object.__setattr__(self, 'names', names)
        object.__setattr__(self, 'periods', tuple(checked))

    # -----------------------------------------------------------------

    @property
    def arity(self) -> int:
        return len(self.periods)

    @property
    def dimension(self) -> int:
        ''' A quantum number is a scalar value; multiplicity lives in sequences. '''
        return 1

    @property
    def is_finite(self) -> bool:
        return all(p != INF for p in self.periods)

    @cached_property
    def period_array(self) -> np.ndarray:
        ''' Periods as int64 with 0 marking an unbounded component. '''
        return np.array([0 if p == INF else p for p in self.periods], dtype=np.int64)

    # -----------------------------------------------------------------

    def __call__(self, *values) -> "QuantumNumber":
        return QuantumNumber(self, values)

    def from_tuple(self, values: Iterable) -> "QuantumNumber":
        return QuantumNumber(self, tuple(values))

    def zero(self) -> "QuantumNumber":
        ''' Group identity: the all-zero tuple. '''
        return QuantumNumber._from_reduced(self, (0,) * self.arity)

    def reduce_array(self, values: np.ndarray) -> np.ndarray:
        '''
        Reduce the finite components of an integer array of shape (..., arity)
        into their canonical windows [0, p).
        '''
        values  = np.asarray(values, dtype=np.int64)
        periods = self.period_array
        finite  = periods > 0
        if not np.any(finite):
            return values
        out             = values.copy()
        out[..., finite]= np.mod(out[..., finite], periods[finite])
        return out

    def regularize(self, values) -> np.ndarray:
        ''' See :func:`regularize`. '''
        return regularize(self, values)

    def __repr__(self) -> str:
        comps = ", ".join(f"{n}:{p}" for n, p in zip(self.names, self.periods))
        return f"QuantumNumberSpec({self.name}; {comps})"

####################################################################################################

def check_specs(first: QuantumNumberSpec, second: QuantumNumberSpec) -> None:
    """
    Verify that two families can be combined.

    Raises
    ------
    ArityMismatch
        If the number of components differs.
    IncompatiblePeriod
        If a component carries different periods (finite vs. unbounded included).
    TypeError
        If arity and periods agree but the families are different.
    """
    if first is second or first == second:
        return
    if first.arity != second.arity:
        raise ArityMismatch(f"{ArityMismatch.ARITY_MISMATCH}: {first.name} has {first.arity}, {second.name} has {second.arity}.")
    for i, (p, q) in enumerate(zip(first.periods, second.periods)):
        if p != q:
            raise IncompatiblePeriod(f"{IncompatiblePeriod.PERIOD_MISMATCH}: component {i} has period {p} in {first.name} and {q} in {second.name}.")
    raise TypeError(f"{QuantumNumberError.FAMILY_MISMATCH}: {first.name} vs {second.name}.")

####################################################################################################
#! Value type
####################################################################################################

@total_ordering
class QuantumNumber:
    """
    A single Abelian quantum number.

    Instances are immutable and hashable. They compare lexicographically over
    their components and support the group arithmetic of the direct product
    of Z (unbounded components) and Z_p (finite components).

    Notes
    -----
    Finite components are always stored reduced into ``[0, p)``, so that
    ``Momentum1(10)(11) == Momentum1(10)(1)``.
    """

    __slots__ = ('_spec', '_values')

    def __init__(self, spec: QuantumNumberSpec, values: Sequence):
        values = tuple(values)
        if len(values) != spec.arity:
            raise ArityMismatch(f"{ArityMismatch.ARITY_MISMATCH}: {spec.name} expects {spec.arity} components, got {len(values)}.")
        reduced = []
        for v, p in zip(values, spec.periods):
            v = as_int(v)
            reduced.append(v if p == INF else v % p)
        self._spec      = spec
        self._values    = tuple(reduced)

    @classmethod
    def _from_reduced(cls, spec: QuantumNumberSpec, values: Tuple[int, ...]) -> "QuantumNumber":
        obj         = object.__new__(cls)
        obj._spec   = spec
        obj._values = values
        return obj

    def __reduce__(self):
        return (QuantumNumber, (self._spec, self._values))

    # -----------------------------------------------------------------
    #! Description
    # -----------------------------------------------------------------

    @property
    def spec(self) -> QuantumNumberSpec:
        return self._spec

    @property
    def periods(self) -> Tuple[Period, ...]:
        return self._spec.periods

    @property
    def dimension(self) -> int:
        return 1

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __getitem__(self, i):
        return self._values[i]

    def __getattr__(self, name: str):
        try:
            spec = object.__getattribute__(self, '_spec')
        except AttributeError:
            raise AttributeError(name) from None
        if name in spec.names:
            return self._values[spec.names.index(name)]
        raise AttributeError(f"{spec.name} has no component {name!r}")

    def keys(self) -> Tuple[str, ...]:
        return self._spec.names

    def values(self) -> Tuple[int, ...]:
        return self._values

    def items(self):
        return tuple(zip(self._spec.names, self._values))

    def replace(self, **components) -> "QuantumNumber":
        """
        Return a copy with the named components replaced.
        """
        values = list(self._values)
        for key, val in components.items():
            if key not in self._spec.names:
                raise AttributeError(f"{self._spec.name} has no component {key!r}")
            values[self._spec.names.index(key)] = val
        return QuantumNumber(self._spec, values)

    def __repr__(self) -> str:
        return f"{self._spec.name}({', '.join(str(v) for v in self._values)})"

    __str__ = __repr__

    # -----------------------------------------------------------------
    #! Comparison
    # -----------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, QuantumNumber):
            return NotImplemented
        return self._values == other._values and self._spec == other._spec

    def __lt__(self, other) -> bool:
        if not isinstance(other, QuantumNumber):
            return NotImplemented
        check_specs(self._spec, other._spec)
        return self._values < other._values

    def __hash__(self) -> int:
        return hash(self._values)

    # -----------------------------------------------------------------
    #! Group arithmetic
    # -----------------------------------------------------------------

    def _reduced(self, values) -> "QuantumNumber":
        out = tuple(v if p == INF else v % p for v, p in zip(values, self._spec.periods))
        return QuantumNumber._from_reduced(self._spec, out)

    def __pos__(self) -> "QuantumNumber":
        return self

    def __neg__(self) -> "QuantumNumber":
        return self._reduced(-v for v in self._values)

    def __add__(self, other):
        if not isinstance(other, QuantumNumber):
            return NotImplemented
        check_specs(self._spec, other._spec)
        return self._reduced(a + b for a, b in zip(self._values, other._values))

    def __sub__(self, other):
        if not isinstance(other, QuantumNumber):
            return NotImplemented
        check_specs(self._spec, other._spec)
        return self._reduced(a - b for a, b in zip(self._values, other._values))

    def __mul__(self, factor):
        if not is_integral(factor):
            return NotImplemented
        factor = int(factor)
        return self._reduced(v * factor for v in self._values)

    __rmul__ = __mul__

    def __pow__(self, n):
        ''' n-fold combination of the quantum number with itself. '''
        if not is_integral(n):
            return NotImplemented
        return self * int(n)

####################################################################################################
#! Helpers
####################################################################################################

def combine(numbers: Sequence[QuantumNumber], signs: Optional[Sequence[int]] = None) -> QuantumNumber:
    """
    Signed sum ``sum_i signs[i] * numbers[i]`` of quantum numbers of one family.
    """
    if len(numbers) == 0:
        raise ValueError("At least one quantum number is required.")
    signs   = check_signs(signs, len(numbers))
    result  = numbers[0] if signs[0] > 0 else -numbers[0]
    for qn, sign in zip(numbers[1:], signs[1:]):
        result = result + qn if sign > 0 else result - qn
    return result

def check_signs(signs: Optional[Sequence[int]], n: int) -> Tuple[int, ...]:
    """
    Validate a signs tuple (one +1/-1 per operand); ``None`` means all +1.
    """
    if signs is None:
        return (1,) * n
    signs = tuple(int(s) for s in signs)
    if len(signs) != n:
        raise ValueError(f"Expected {n} signs, got {len(signs)}.")
    if any(s not in (1, -1) for s in signs):
        raise ValueError(f"Signs must be +1 or -1, got {signs}.")
    return signs

def regularize(spec: QuantumNumberSpec, values) -> np.ndarray:
    """
    Map real-valued vectors onto the integer lattice of a family.

    Every component is rounded to the nearest integer (ties to even); finite
    components are then reduced modulo their period into ``[0, p)``. This
    never fails on out-of-range input.

    Parameters
    ----------
    spec : QuantumNumberSpec
        Family whose periods are used.
    values : array-like
        A single vector of shape ``(arity,)`` or a batch of shape ``(n, arity)``
        with one vector per row.

    Returns
    -------
    np.ndarray
        int64 array with the same shape as ``values``, one regularized tuple per row.
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape[-1:] != (spec.arity,):
        raise ArityMismatch(f"{ArityMismatch.ARITY_MISMATCH}: rows must have {spec.arity} entries, got shape {arr.shape}.")
    return spec.reduce_array(np.rint(arr).astype(np.int64))

####################################################################################################

__all__ = [
    "INF",
    "QuantumNumberSpec",
    "QuantumNumber",
    "check_specs",
    "check_signs",
    "combine",
    "regularize",
]
