"""
Algebra of compressed quantum-number sequences.

Provides the operations that combine, reorder and search sequences:

- `sort_sequence`    : canonicalize and return the flat-position permutation,
- `filter_sequence`  : keep the blocks carrying selected values,
- `permute_sequence` : reorder/select blocks or flat positions,
- `find_all`         : locate a value in block or flat coordinates,
- `union`            : direct sum with sign conventions,
- `kron`             : tensor product with sign conventions (row-major),
- `prod`             : tensor product followed by canonicalization, with provenance records.

Signs negate every value drawn from the corresponding operand before the
combination, which models bra/ket or particle/hole conjugation.

-----------------------------------------------------
File        : QAN/Numbers/algebra.py
Description : Sort, filter, permute, search, direct sum and tensor product of sequences.
Author      : Maksymilian Kliczkowski
Date        : 2025-11-06
-----------------------------------------------------
"""

import  numpy       as np
from    typing      import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union
from    itertools   import product
from    collections import OrderedDict

from    QAN.Numbers.base        import QuantumNumber, check_signs, check_specs, combine
from    QAN.Numbers.sequence    import AbelianNumberSequence, SortForm
from    QAN.Numbers.utils       import check_choice

Operand         = Union[QuantumNumber, AbelianNumberSequence]
Provenance      = "OrderedDict[QuantumNumber, OrderedDict[Tuple[QuantumNumber, ...], Union[range, Tuple[range, ...]]]]"

_SEARCH_MODES   = ('compression', 'expansion')

# -----------------------------------------------------
#! Helpers
# -----------------------------------------------------

def as_sequence(operand: Operand) -> AbelianNumberSequence:
    ''' A bare quantum number acts as a one-block sequence of dimension 1. '''
    if isinstance(operand, AbelianNumberSequence):
        return operand
    if isinstance(operand, QuantumNumber):
        return AbelianNumberSequence.single(operand, 1)
    raise TypeError(f"Expected a QuantumNumber or an AbelianNumberSequence, got {type(operand).__name__}.")

def _common_spec(sequences: Sequence[AbelianNumberSequence]):
    spec = None
    for seq in sequences:
        if seq.spec is None:
            continue
        if spec is None:
            spec = seq.spec
        else:
            check_specs(spec, seq.spec)
    return spec

def _kron_blocks(sequences: Sequence[AbelianNumberSequence],
                signs    : Tuple[int, ...]) -> Iterator[Tuple[Tuple[QuantumNumber, ...], QuantumNumber, int]]:
    '''
    Blocks of the tensor product in row-major order (first operand outermost).
    Yields (source values, combined value, count).
    '''
    counts = [seq.counts for seq in sequences]
    for blocks in product(*(range(len(seq)) for seq in sequences)):
        sources = tuple(seq.contents[b] for seq, b in zip(sequences, blocks))
        count   = 1
        for c, b in zip(counts, blocks):
            count *= int(c[b])
        yield sources, combine(sources, signs), count

# -----------------------------------------------------
#! Sort
# -----------------------------------------------------

def sort_sequence(qns: AbelianNumberSequence) -> Tuple[AbelianNumberSequence, np.ndarray]:
    """
    Canonicalize a sequence.

    Blocks are grouped by value, counts of equal values are summed and the
    distinct values are emitted in ascending order. Within a merged block the
    original blocks keep their relative order.

    Returns
    -------
    canonical : AbelianNumberSequence
        Canonical-form sequence.
    permutation : np.ndarray
        int64 array of length ``dimension`` mapping every old flat position to
        its new one: ``qns.expand('contents')[i] == canonical.expand('contents')[permutation[i]]``.
    """
    contents    = qns.contents
    counts      = qns.counts
    order       = sorted(range(len(contents)), key=lambda b: contents[b].values())

    merged      : List[QuantumNumber]   = []
    merged_cnt  : List[int]             = []
    new_start   = np.zeros(len(contents), dtype=np.int64)
    offset      = 0
    for b in order:
        if not merged or merged[-1] != contents[b]:
            merged.append(contents[b])
            merged_cnt.append(0)
        new_start[b]     = offset
        offset          += int(counts[b])
        merged_cnt[-1]  += int(counts[b])

    permutation = np.repeat(new_start - qns.indptr[:-1], counts) + np.arange(qns.dimension, dtype=np.int64)
    canonical   = AbelianNumberSequence._from_counts(SortForm.CANONICAL, merged, merged_cnt, qns.spec)
    return canonical, permutation

# -----------------------------------------------------
#! Filter / permute / search
# -----------------------------------------------------

def filter_sequence(targets: Union[QuantumNumber, Iterable[QuantumNumber]],
                    qns    : AbelianNumberSequence) -> AbelianNumberSequence:
    """
    Keep only the blocks whose value is one of ``targets`` (a single value or a
    collection), preserving block order, counts and the form.
    """
    wanted  = {targets} if isinstance(targets, QuantumNumber) else set(targets)
    blocks  = [i for i, qn in enumerate(qns.contents) if qn in wanted]
    return qns.select_blocks(blocks, qns.form)

def permute_sequence(qns    : AbelianNumberSequence,
                    indices : Sequence[int],
                    mode    : str = 'compression') -> AbelianNumberSequence:
    """
    Select and reorder parts of a sequence.

    Parameters
    ----------
    qns : AbelianNumberSequence
        Source sequence.
    indices : Sequence[int]
        Block indices (``mode='compression'``) or flat positions
        (``mode='expansion'``). Repetitions and omissions are allowed.
    mode : str
        ``'compression'`` keeps the selected blocks with their counts,
        ``'expansion'`` produces one singleton block per selected position.

    Returns
    -------
    AbelianNumberSequence
        General-form sequence.
    """
    check_choice(mode, _SEARCH_MODES, 'mode')
    if mode == 'compression':
        return qns[list(indices)]
    blocks = qns.find_blocks(indices)
    return AbelianNumberSequence._from_counts(SortForm.GENERAL,
                [qns.contents[b] for b in blocks],
                np.ones(len(blocks), dtype=np.int64),
                qns.spec)

def find_all(value: QuantumNumber, qns: AbelianNumberSequence, mode: str = 'compression') -> List[int]:
    """
    Locate ``value`` in a sequence.

    ``mode='compression'`` returns the indices of the blocks carrying the value
    (block order), ``mode='expansion'`` the ascending flat positions they cover.
    An absent value gives an empty list.
    """
    check_choice(mode, _SEARCH_MODES, 'mode')
    blocks = [i for i, qn in enumerate(qns.contents) if qn == value]
    if mode == 'compression':
        return blocks
    return [pos for b in blocks for pos in qns.range(b)]

# -----------------------------------------------------
#! Direct sum and tensor product
# -----------------------------------------------------

def union(*operands: Operand, signs: Optional[Sequence[int]] = None) -> AbelianNumberSequence:
    """
    Direct sum: the blocks of ``signs[0] * operands[0]`` followed by those of
    ``signs[1] * operands[1]`` and so on, counts unchanged (General form).
    """
    if not operands:
        raise ValueError("union requires at least one operand.")
    sequences   = [as_sequence(op) for op in operands]
    signs       = check_signs(signs, len(sequences))
    spec        = _common_spec(sequences)

    contents    = []
    counts      = []
    for seq, sign in zip(sequences, signs):
        contents.extend(qn if sign > 0 else -qn for qn in seq.contents)
        counts.extend(seq.counts.tolist())
    return AbelianNumberSequence._from_counts(SortForm.GENERAL, contents, counts, spec)

def kron(*operands: Operand, signs: Optional[Sequence[int]] = None) -> Operand:
    """
    Tensor product of sequences.

    Blocks are produced in row-major order: the first operand's blocks vary
    slowest, the last operand's fastest. Each block combination gives one
    block with value ``sum_j signs[j] * v_j`` and count ``prod_j count_j``
    (General form). This order fixes how a multi-index basis of the product
    space maps onto flat positions.

    If every operand is a bare quantum number the signed sum is returned.
    """
    if not operands:
        raise ValueError("kron requires at least one operand.")
    signs = check_signs(signs, len(operands))
    if all(isinstance(op, QuantumNumber) for op in operands):
        return combine(operands, signs)

    sequences   = [as_sequence(op) for op in operands]
    spec        = _common_spec(sequences)
    contents    = []
    counts      = []
    for _, value, count in _kron_blocks(sequences, signs):
        contents.append(value)
        counts.append(count)
    return AbelianNumberSequence._from_counts(SortForm.GENERAL, contents, counts, spec)

def prod(*operands: Operand, signs: Optional[Sequence[int]] = None) -> Tuple[AbelianNumberSequence, Provenance]:
    """
    Canonical tensor product with provenance.

    Returns
    -------
    canonical : AbelianNumberSequence
        ``kron(*operands, signs=signs)`` brought to Canonical form.
    records : OrderedDict
        For every distinct result value (ascending) an ordered mapping from
        each contributing tuple of source values (unsigned, one per operand) to
        the flat positions of ``canonical`` occupied by its contribution.
        The layout is the one of ``sort_sequence(kron(...))``: inside a value's
        block the ``kron`` blocks keep their order, and adjacent blocks of the
        same tuple form one run. A tuple with a single run maps to a ``range``;
        a tuple that recurs in separate runs maps to a tuple of ascending
        ``range`` objects. The runs of one value tile its block exactly; the
        tuples appear in the order of their first occurrence in ``kron``.
    """
    if not operands:
        raise ValueError("prod requires at least one operand.")
    sequences   = [as_sequence(op) for op in operands]
    signs       = check_signs(signs, len(sequences))
    spec        = _common_spec(sequences)

    # kron blocks grouped by value, in kron order (stable canonicalization)
    groups: Dict[QuantumNumber, List[Tuple[Tuple[QuantumNumber, ...], int]]] = {}
    for sources, value, count in _kron_blocks(sequences, signs):
        groups.setdefault(value, []).append((sources, count))

    values      = sorted(groups, key=lambda qn: qn.values())
    records     = OrderedDict()
    counts      = []
    start       = 0
    for value in values:
        runs: "OrderedDict[Tuple[QuantumNumber, ...], List[range]]" = OrderedDict()
        begin = start
        for sources, count in groups[value]:
            tuple_runs = runs.setdefault(sources, [])
            if tuple_runs and tuple_runs[-1].stop == start:
                tuple_runs[-1] = range(tuple_runs[-1].start, start + count)
            else:
                tuple_runs.append(range(start, start + count))
            start += count
        records[value] = OrderedDict((sources, r[0] if len(r) == 1 else tuple(r)) for sources, r in runs.items())
        counts.append(start - begin)
    canonical = AbelianNumberSequence._from_counts(SortForm.CANONICAL, values, counts, spec)
    return canonical, records

####################################################################################################

__all__ = [
    'as_sequence',
    'sort_sequence',
    'filter_sequence',
    'permute_sequence',
    'find_all',
    'union',
    'kron',
    'prod',
]
