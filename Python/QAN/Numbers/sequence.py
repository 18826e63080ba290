"""
Compressed sequences of Abelian quantum numbers.

A compressed sequence represents a long ordered multiset of quantum numbers as
a short list of blocks ``(value, contiguous range)``. The ranges are stored as
a boundary array ``indptr`` of length ``n + 1`` starting at 0, whose
consecutive differences are the block counts. The total number of flat
positions is the *dimension* of the sequence.

Every sequence carries a sort-form tag:

- UNIQUE    : each value occurs in one block only, blocks in insertion order,
- GENERAL   : values may repeat across blocks in any order,
- CANONICAL : values are distinct and blocks are sorted ascending.

Sequences are value types. All derived sequences own fresh storage and no
public operation mutates an existing sequence.

Example
-------
>>> CNZ4    = QuantumNumberSpec("CNZ4", ("N", "Z"), (math.inf, 4))
>>> qns     = AbelianNumberSequence('U', [CNZ4(1, 3), CNZ4(-1, 1)], [2, 3])
>>> qns.dimension, len(qns), qns.range(1)
(5, 2, range(2, 5))
>>> qns.find_block(3)
1

--------------------------------------------
File        : QAN/Numbers/sequence.py
Description : Compressed quantum-number sequence container and its queries.
Author      : Maksymilian Kliczkowski
Date        : 2025-11-05
--------------------------------------------
"""

import  numpy       as np
from    typing      import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union
from    enum        import Enum
from    collections import OrderedDict

from    QAN.Numbers.errors          import InvalidSequenceLayout
from    QAN.Numbers.base            import QuantumNumber, QuantumNumberSpec, check_specs
from    QAN.Numbers.utils           import check_choice, is_integral
from    QAN.Numbers.jit.sequence_jit import find_block_jit, find_blocks_jit

####################################################################################################
#! Enumerations
####################################################################################################

class SortForm(Enum):
    """
    Invariant class of a compressed sequence.

    - UNIQUE    : distinct block values, insertion order
    - GENERAL   : no uniqueness or ordering guarantee
    - CANONICAL : distinct block values in ascending order
    """

    UNIQUE      = 'U'
    GENERAL     = 'G'
    CANONICAL   = 'C'

    def __str__(self):
        return self.value

    def __repr__(self):
        return f"SortForm.{self.name}"

    @classmethod
    def from_string(cls, s: Union[str, "SortForm"]) -> "SortForm":
        """Convert 'U'/'G'/'C' (or the member name, any case) to a SortForm."""
        if isinstance(s, SortForm):
            return s
        key = str(s).strip().upper()
        for member in cls:
            if key in (member.value, member.name):
                return member
        raise ValueError(f"Unknown sort form: {s}. Valid forms: {[m.value for m in cls]}")

_BLOCK_MODES    = ('indptr', 'counts')
_EXPAND_VIEWS   = ('indices', 'contents')

####################################################################################################
#! Lazy views
####################################################################################################

class BlockView:
    """
    Lazy, finite and restartable view over the blocks of a sequence.

    Every call to ``iter`` starts again from the first block.
    """

    __slots__ = ('_n', '_item')

    def __init__(self, n: int, item: Callable[[int], Any]):
        self._n     = n
        self._item  = item

    def __len__(self) -> int:
        return self._n

    def __iter__(self) -> Iterator:
        return (self._item(i) for i in range(self._n))

    def __reversed__(self) -> Iterator:
        return (self._item(i) for i in range(self._n - 1, -1, -1))

    def __getitem__(self, i: int):
        if not -self._n <= i < self._n:
            raise IndexError(f"Block index {i} out of range for {self._n} blocks.")
        return self._item(i % self._n)

    def __repr__(self) -> str:
        return f"BlockView({list(self)})"

####################################################################################################
#! Sequence container
####################################################################################################

class AbelianNumberSequence:
    """
    Compressed sequence of Abelian quantum numbers.

    Parameters
    ----------
    form : str or SortForm
        Declared sort form ('U', 'G' or 'C').
    contents : Iterable[QuantumNumber]
        Block values, all of one family.
    counts : array-like of int, optional
        Positive block counts. Defaults to one position per block.
    indptr : array-like of int, optional
        Boundary array of length ``len(contents) + 1`` (alternative to ``counts``).

    Raises
    ------
    InvalidSequenceLayout
        If the boundaries/counts are malformed or the data violate the declared form.
    ArityMismatch, IncompatiblePeriod
        If the values do not belong to one family.
    """

    __slots__ = ('_form', '_contents', '_indptr', '_spec')

    def __init__(self,
                form        : Union[str, SortForm],
                contents    : Iterable[QuantumNumber],
                counts      : Optional[Sequence[int]]   = None,
                *,
                indptr      : Optional[Sequence[int]]   = None):
        form        = SortForm.from_string(form)
        contents    = tuple(contents)
        spec        = _family_of(contents)
        n           = len(contents)

        if counts is not None and indptr is not None:
            raise ValueError("Pass either `counts` or `indptr`, not both.")
        if indptr is None:
            counts = np.ones(n, dtype=np.int64) if counts is None else _as_int_array(counts)
            if counts.shape != (n,):
                raise InvalidSequenceLayout(f"{InvalidSequenceLayout.WRONG_LENGTH}: {n} values, counts of shape {counts.shape}.")
            if np.any(counts <= 0):
                raise InvalidSequenceLayout(f"{InvalidSequenceLayout.NOT_POSITIVE_COUNT}: {counts.tolist()}.")
            indptr = np.concatenate(([0], np.cumsum(counts))).astype(np.int64)
        else:
            indptr = _as_int_array(indptr)
            if indptr.shape != (n + 1,):
                raise InvalidSequenceLayout(f"{InvalidSequenceLayout.WRONG_LENGTH}: {n} values need {n + 1} boundaries, got shape {indptr.shape}.")
            if indptr[0] != 0:
                raise InvalidSequenceLayout(f"{InvalidSequenceLayout.NOT_STARTING_AT_ZERO}: {indptr.tolist()}.")
            if np.any(np.diff(indptr) <= 0):
                raise InvalidSequenceLayout(f"{InvalidSequenceLayout.NOT_INCREASING}: {indptr.tolist()}.")
        _check_form(form, contents)

        indptr.setflags(write=False)
        self._form      = form
        self._contents  = contents
        self._indptr    = indptr
        self._spec      = spec

    @classmethod
    def _from_parts(cls,
                    form        : SortForm,
                    contents    : Tuple[QuantumNumber, ...],
                    indptr      : np.ndarray,
                    spec        : Optional[QuantumNumberSpec]) -> "AbelianNumberSequence":
        ''' Trusted constructor for derived sequences (no validation). '''
        obj             = object.__new__(cls)
        indptr          = np.ascontiguousarray(indptr, dtype=np.int64)
        indptr.setflags(write=False)
        obj._form       = form
        obj._contents   = tuple(contents)
        obj._indptr     = indptr
        obj._spec       = spec
        return obj

    @classmethod
    def _from_counts(cls, form, contents, counts, spec) -> "AbelianNumberSequence":
        indptr = np.zeros(len(counts) + 1, dtype=np.int64)
        np.cumsum(np.asarray(counts, dtype=np.int64), out=indptr[1:])
        return cls._from_parts(form, contents, indptr, spec)

    @classmethod
    def single(cls, qn: QuantumNumber, count: int = 1) -> "AbelianNumberSequence":
        """
        One-block sequence holding ``count`` copies of ``qn`` (Canonical form).
        """
        return cls(SortForm.CANONICAL, (qn,), [count])

    @classmethod
    def from_mapping(cls, mapping: Mapping[QuantumNumber, Union[int, range]]) -> "AbelianNumberSequence":
        """
        Build a Unique-form sequence from an ordered ``value -> count`` or
        ``value -> range`` mapping, preserving the iteration order.

        Ranges must have step 1 and tile ``[0, dimension)`` in order.
        """
        contents    = list(mapping.keys())
        counts      = []
        start       = 0
        for qn, spec in mapping.items():
            if isinstance(spec, range):
                if spec.step != 1 or spec.start != start:
                    raise InvalidSequenceLayout(f"{InvalidSequenceLayout.NOT_INCREASING}: range {spec} of {qn} does not continue at {start}.")
                counts.append(len(spec))
            else:
                counts.append(spec)
            start += counts[-1]
        return cls(SortForm.UNIQUE, contents, counts)

    # -----------------------------------------------------------------
    #! Description
    # -----------------------------------------------------------------

    @property
    def form(self) -> SortForm:
        return self._form

    @property
    def spec(self) -> Optional[QuantumNumberSpec]:
        ''' Family of the values (None for an empty sequence). '''
        return self._spec

    @property
    def contents(self) -> Tuple[QuantumNumber, ...]:
        return self._contents

    @property
    def indptr(self) -> np.ndarray:
        ''' Read-only boundary array of length ``len(self) + 1``. '''
        return self._indptr

    @property
    def counts(self) -> np.ndarray:
        return np.diff(self._indptr)

    @property
    def dimension(self) -> int:
        ''' Number of flat positions, i.e. the sum of the block counts. '''
        return int(self._indptr[-1])

    def __len__(self) -> int:
        return len(self._contents)

    @property
    def is_sorted(self) -> bool:
        ''' Whether the block values are in non-decreasing order. '''
        return all(not (b < a) for a, b in zip(self._contents, self._contents[1:]))

    def content_array(self) -> np.ndarray:
        ''' Block values as an int64 array of shape ``(len(self), arity)``. '''
        arity = self._spec.arity if self._spec is not None else 0
        return np.array([qn.values() for qn in self._contents], dtype=np.int64).reshape(len(self._contents), arity)

    # -----------------------------------------------------------------
    #! Block queries
    # -----------------------------------------------------------------

    def _block(self, i: int) -> int:
        n = len(self._contents)
        if not is_integral(i):
            raise TypeError(f"Block indices must be integers, got {type(i).__name__}.")
        if not -n <= i < n:
            raise IndexError(f"Block index {i} out of range for {n} blocks.")
        return int(i) % n

    def count(self, i: int) -> int:
        ''' Number of flat positions in block ``i``. '''
        i = self._block(i)
        return int(self._indptr[i + 1] - self._indptr[i])

    def range(self, i: int) -> range:
        ''' Flat positions covered by block ``i``. '''
        i = self._block(i)
        return range(int(self._indptr[i]), int(self._indptr[i + 1]))

    def cumsum(self, i: int) -> int:
        ''' Number of flat positions in blocks ``0..i``. '''
        i = self._block(i)
        return int(self._indptr[i + 1])

    def value(self, i: int) -> QuantumNumber:
        return self._contents[self._block(i)]

    def find_block(self, position: int, guess: int = 0) -> int:
        """
        Index of the block containing the flat ``position``.

        The search starts at block ``guess`` and falls back to a binary search
        on the relevant side, so sequential access is O(1) and the worst case
        O(log n). The answer never depends on the guess.
        """
        dim = self.dimension
        if not 0 <= position < dim:
            raise IndexError(f"Position {position} out of range for dimension {dim}.")
        guess = min(max(int(guess), 0), len(self._contents) - 1)
        return int(find_block_jit(self._indptr, np.int64(position), np.int64(guess)))

    def find_blocks(self, positions: Sequence[int]) -> np.ndarray:
        ''' Block index of every flat position in ``positions``. '''
        positions = _as_int_array(positions).reshape(-1)
        if positions.size and (positions.min() < 0 or positions.max() >= self.dimension):
            raise IndexError(f"Positions out of range for dimension {self.dimension}.")
        return find_blocks_jit(self._indptr, positions)

    # -----------------------------------------------------------------
    #! Iteration and views
    # -----------------------------------------------------------------

    def __iter__(self) -> Iterator[QuantumNumber]:
        return iter(self._contents)

    def __reversed__(self) -> Iterator[QuantumNumber]:
        return reversed(self._contents)

    def keys(self) -> BlockView:
        return BlockView(len(self._contents), self._contents.__getitem__)

    def values(self, mode: str = 'indptr') -> BlockView:
        ''' Block ranges (``mode='indptr'``) or block counts (``mode='counts'``). '''
        check_choice(mode, _BLOCK_MODES, 'mode')
        item = self.range if mode == 'indptr' else self.count
        return BlockView(len(self._contents), item)

    def pairs(self, mode: str = 'indptr') -> BlockView:
        ''' ``(value, range)`` or ``(value, count)`` pairs in block order. '''
        check_choice(mode, _BLOCK_MODES, 'mode')
        item = self.range if mode == 'indptr' else self.count
        return BlockView(len(self._contents), lambda i: (self._contents[i], item(i)))

    def to_dict(self, mode: str = 'indptr') -> "OrderedDict[QuantumNumber, Union[range, int]]":
        """
        Export to an ordered ``value -> range`` or ``value -> count`` mapping.

        Raises
        ------
        ValueError
            If a value occurs in more than one block.
        """
        result = OrderedDict(self.pairs(mode))
        if len(result) != len(self._contents):
            raise ValueError("Cannot export a sequence with repeated values to a mapping.")
        return result

    def expand(self, view: str = 'indices') -> Union[np.ndarray, List[QuantumNumber]]:
        """
        Decompress the sequence into one entry per flat position.

        Parameters
        ----------
        view : str
            ``'indices'`` gives the owning block index of every position (int64
            array), ``'contents'`` the owning block value (list).
        """
        check_choice(view, _EXPAND_VIEWS, 'view')
        blocks = np.repeat(np.arange(len(self._contents), dtype=np.int64), self.counts)
        if view == 'indices':
            return blocks
        return [self._contents[b] for b in blocks]

    def expanded_array(self) -> np.ndarray:
        ''' Values of every flat position as an int64 array of shape ``(dimension, arity)``. '''
        return np.repeat(self.content_array(), self.counts, axis=0)

    # -----------------------------------------------------------------
    #! Indexing
    # -----------------------------------------------------------------

    def __getitem__(self, key):
        if isinstance(key, slice):
            blocks  = range(len(self._contents))[key]
            form    = self._form
            if blocks.step < 0 and form is SortForm.CANONICAL:
                form = SortForm.UNIQUE
            return self.select_blocks(list(blocks), form)
        if is_integral(key):
            return self._contents[self._block(key)]
        blocks = [self._block(i) for i in key]
        return self.select_blocks(blocks, SortForm.GENERAL)

    def select_blocks(self, blocks: Sequence[int], form: SortForm = SortForm.GENERAL) -> "AbelianNumberSequence":
        """
        New sequence made of the given blocks (with their counts) in the given order.

        ``form`` is not re-checked: pass the source form only for an
        increasing selection, where its invariant is preserved.
        """
        blocks = [self._block(b) for b in blocks]
        counts = self.counts
        return AbelianNumberSequence._from_counts(form,
                    [self._contents[b] for b in blocks],
                    [counts[b] for b in blocks],
                    self._spec)

    # -----------------------------------------------------------------
    #! Equality and rendering
    # -----------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, AbelianNumberSequence):
            return NotImplemented
        return (self._form is other._form
                and self._contents == other._contents
                and np.array_equal(self._indptr, other._indptr))

    def __hash__(self) -> int:
        return hash((self._form, self._contents, self._indptr.tobytes()))

    def __str__(self) -> str:
        return f"QNS({len(self._contents)}, {self.dimension})"

    def __repr__(self) -> str:
        blocks = ", ".join(f"{qn}=>{r.start}:{r.stop}" for qn, r in self.pairs('indptr'))
        return f"QNS({blocks})"

    # -----------------------------------------------------------------
    #! Arithmetic on block values
    # -----------------------------------------------------------------

    def _mapped(self, fun: Callable[[QuantumNumber], QuantumNumber]) -> "AbelianNumberSequence":
        contents    = tuple(fun(qn) for qn in self._contents)
        spec        = contents[0].spec if contents else self._spec
        return AbelianNumberSequence._from_parts(derived_form(self._form, contents), contents, self._indptr, spec)

    def __pos__(self) -> "AbelianNumberSequence":
        return self

    def __neg__(self) -> "AbelianNumberSequence":
        return self._mapped(lambda qn: -qn)

    def __add__(self, other):
        if not isinstance(other, QuantumNumber):
            return NotImplemented
        return self._mapped(lambda qn: qn + other)

    __radd__ = __add__

    def __sub__(self, other):
        if not isinstance(other, QuantumNumber):
            return NotImplemented
        return self._mapped(lambda qn: qn - other)

    def __rsub__(self, other):
        if not isinstance(other, QuantumNumber):
            return NotImplemented
        return self._mapped(lambda qn: other - qn)

    def __mul__(self, factor):
        if not is_integral(factor):
            return NotImplemented
        return self._mapped(lambda qn: qn * factor)

    __rmul__ = __mul__

    def __pow__(self, n):
        ''' ``n``-fold tensor product of the sequence with itself. '''
        if not is_integral(n) or n < 1:
            return NotImplemented
        from QAN.Numbers.algebra import kron
        return kron(*([self] * int(n)))

####################################################################################################
#! Helpers
####################################################################################################

def _as_int_array(values) -> np.ndarray:
    arr = np.asarray(values)
    if arr.size == 0:
        return arr.astype(np.int64)
    if not np.issubdtype(arr.dtype, np.integer):
        if not (np.issubdtype(arr.dtype, np.floating) and np.all(np.mod(arr, 1) == 0)):
            raise InvalidSequenceLayout(f"Layout arrays must be integral, got {arr.dtype}.")
    return arr.astype(np.int64)

def _family_of(contents: Tuple[QuantumNumber, ...]) -> Optional[QuantumNumberSpec]:
    if not contents:
        return None
    for qn in contents:
        if not isinstance(qn, QuantumNumber):
            raise TypeError(f"Sequence values must be QuantumNumber instances, got {type(qn).__name__}.")
    spec = contents[0].spec
    for qn in contents[1:]:
        check_specs(spec, qn.spec)
    return spec

def _check_form(form: SortForm, contents: Tuple[QuantumNumber, ...]) -> None:
    if form is SortForm.GENERAL:
        return
    if len(set(contents)) != len(contents):
        raise InvalidSequenceLayout(f"{InvalidSequenceLayout.DUPLICATED_VALUES}: {list(contents)}.")
    if form is SortForm.CANONICAL and any(b < a for a, b in zip(contents, contents[1:])):
        raise InvalidSequenceLayout(f"{InvalidSequenceLayout.NOT_SORTED}: {list(contents)}.")

def derived_form(form: SortForm, contents: Tuple[QuantumNumber, ...]) -> SortForm:
    """
    Form of a sequence obtained by mapping the values of a ``form`` sequence.

    General stays General; otherwise Unique survives if the mapped values are
    still distinct and Canonical if they are also still ascending.
    """
    if form is SortForm.GENERAL or len(set(contents)) != len(contents):
        return SortForm.GENERAL
    if form is SortForm.CANONICAL and all(a < b for a, b in zip(contents, contents[1:])):
        return SortForm.CANONICAL
    return SortForm.UNIQUE

####################################################################################################

__all__ = [
    'SortForm',
    'BlockView',
    'AbelianNumberSequence',
    'derived_form',
]
