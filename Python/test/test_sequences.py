"""
Tests for the compressed quantum-number sequence container.

File        : test/test_sequences.py
Description : Layout validation, block queries, lazy views, indexing, equality and value arithmetic.
Author      : Maksymilian Kliczkowski
Date        : 2025-11-08
"""

import unittest
from collections import OrderedDict

import numpy as np
import pytest

from QAN.Numbers.base import INF, QuantumNumberSpec
from QAN.Numbers.errors import ArityMismatch, InvalidSequenceLayout
from QAN.Numbers.sequence import AbelianNumberSequence, SortForm
from QAN.Numbers.algebra import kron

CN      = QuantumNumberSpec("CN",   ("N",),     (INF,))
CNZ4    = QuantumNumberSpec("CNZ4", ("N", "Z"), (INF, 4))

QNS     = AbelianNumberSequence

class TestSequenceConstruction(unittest.TestCase):

    def setUp(self):
        self.qn1 = CNZ4(1, 3)
        self.qn2 = CNZ4(-1, 1)

    def test_counts_indptr_and_mapping_agree(self):
        qns = QNS('U', [self.qn1, self.qn2], indptr=[0, 2, 5])
        self.assertEqual(qns, QNS('U', [self.qn1, self.qn2], [2, 3]))
        self.assertEqual(qns, QNS.from_mapping(OrderedDict([(self.qn1, 2), (self.qn2, 3)])))
        self.assertEqual(qns, QNS.from_mapping(OrderedDict([(self.qn1, range(0, 2)), (self.qn2, range(2, 5))])))
        self.assertEqual(QNS('U', [self.qn1, self.qn2]), QNS('U', [self.qn1, self.qn2], [1, 1]))

    def test_form_from_string_and_enum(self):
        self.assertIs(QNS('C', [self.qn2, self.qn1]).form, SortForm.CANONICAL)
        self.assertIs(QNS(SortForm.GENERAL, [self.qn1]).form, SortForm.GENERAL)
        self.assertIs(QNS('unique', [self.qn1]).form, SortForm.UNIQUE)
        with self.assertRaises(ValueError):
            QNS('X', [self.qn1])

    def test_single(self):
        qns = QNS.single(CNZ4(3, 2), 4)
        self.assertIs(qns.form, SortForm.CANONICAL)
        self.assertEqual(qns.dimension, 4)
        np.testing.assert_array_equal(qns.expand('indices'), [0, 0, 0, 0])
        self.assertEqual(qns.expand('contents'), [CNZ4(3, 2)] * 4)

    def test_empty_sequence(self):
        qns = QNS('C', [])
        self.assertEqual(len(qns), 0)
        self.assertEqual(qns.dimension, 0)
        self.assertIsNone(qns.spec)
        np.testing.assert_array_equal(qns.indptr, [0])

    def test_indptr_is_read_only(self):
        qns = QNS('U', [self.qn1, self.qn2], [2, 3])
        with self.assertRaises(ValueError):
            qns.indptr[1] = 7

    def test_construction_copies_the_layout(self):
        indptr  = np.array([0, 2, 5])
        qns     = QNS('U', [self.qn1, self.qn2], indptr=indptr)
        indptr[1] = 1
        self.assertEqual(qns.range(0), range(0, 2))

class TestSequenceLayoutErrors(unittest.TestCase):

    def setUp(self):
        self.qn1 = CNZ4(1, 3)
        self.qn2 = CNZ4(-1, 1)

    def test_boundaries_must_start_at_zero(self):
        with self.assertRaises(InvalidSequenceLayout):
            QNS('U', [self.qn1, self.qn2], indptr=[1, 2, 5])

    def test_boundaries_must_increase(self):
        with self.assertRaises(InvalidSequenceLayout):
            QNS('U', [self.qn1, self.qn2], indptr=[0, 3, 3])

    def test_boundaries_length(self):
        with self.assertRaises(InvalidSequenceLayout):
            QNS('U', [self.qn1, self.qn2], indptr=[0, 3])

    def test_counts_must_be_positive(self):
        with self.assertRaises(InvalidSequenceLayout):
            QNS('G', [self.qn1, self.qn2], [2, 0])

    def test_counts_length(self):
        with self.assertRaises(InvalidSequenceLayout):
            QNS('G', [self.qn1, self.qn2], [2, 1, 1])

    def test_unique_rejects_duplicates(self):
        with self.assertRaises(InvalidSequenceLayout):
            QNS('U', [self.qn1, self.qn1], [1, 1])
        # General accepts them
        self.assertEqual(QNS('G', [self.qn1, self.qn1], [1, 1]).dimension, 2)

    def test_canonical_rejects_unsorted(self):
        with self.assertRaises(InvalidSequenceLayout):
            QNS('C', [self.qn1, self.qn2])

    def test_mixed_families(self):
        with self.assertRaises(ArityMismatch):
            QNS('G', [self.qn1, CN(1)])

    def test_non_contiguous_mapping(self):
        with self.assertRaises(InvalidSequenceLayout):
            QNS.from_mapping(OrderedDict([(self.qn1, range(0, 2)), (self.qn2, range(3, 5))]))

    def test_layout_error_is_value_error(self):
        with self.assertRaises(ValueError):
            QNS('U', [self.qn1], indptr=[0, 0])

class TestSequenceQueries(unittest.TestCase):

    def setUp(self):
        self.qn1 = CNZ4(1, 3)
        self.qn2 = CNZ4(-1, 1)
        self.qns = QNS('U', [self.qn1, self.qn2], indptr=[0, 3, 5])

    def test_description(self):
        qns = self.qns
        self.assertEqual(qns.dimension, 5)
        self.assertEqual(len(qns), 2)
        self.assertEqual(qns.spec, CNZ4)
        self.assertFalse(qns.is_sorted)
        self.assertTrue(QNS('C', [self.qn2, self.qn1]).is_sorted)
        np.testing.assert_array_equal(qns.counts, [3, 2])
        np.testing.assert_array_equal(qns.content_array(), [[1, 3], [-1, 1]])

    def test_rendering(self):
        self.assertEqual(str(self.qns), "QNS(2, 5)")
        self.assertEqual(repr(self.qns), "QNS(CNZ4(1, 3)=>0:3, CNZ4(-1, 1)=>3:5)")

    def test_block_accessors(self):
        qns = self.qns
        self.assertEqual((qns.count(0), qns.count(1)), (3, 2))
        self.assertEqual((qns.range(0), qns.range(1)), (range(0, 3), range(3, 5)))
        self.assertEqual((qns.cumsum(0), qns.cumsum(1)), (3, 5))
        self.assertEqual((qns.value(0), qns.value(-1)), (self.qn1, self.qn2))
        with self.assertRaises(IndexError):
            qns.count(2)
        with self.assertRaises(TypeError):
            qns.range(0.5)

    def test_iteration(self):
        qns = self.qns
        self.assertEqual(list(qns), [self.qn1, self.qn2])
        self.assertEqual(list(reversed(qns)), [self.qn2, self.qn1])
        self.assertEqual(list(qns.keys()), [self.qn1, self.qn2])
        self.assertEqual(list(qns.values()), [range(0, 3), range(3, 5)])
        self.assertEqual(list(qns.values('counts')), [3, 2])
        self.assertEqual(list(qns.pairs()), [(self.qn1, range(0, 3)), (self.qn2, range(3, 5))])
        self.assertEqual(list(reversed(qns.pairs('counts'))), [(self.qn2, 2), (self.qn1, 3)])
        with self.assertRaises(ValueError):
            qns.values('positions')

    def test_views_are_restartable(self):
        view = self.qns.pairs()
        self.assertEqual(len(view), 2)
        self.assertEqual(list(view), list(view))
        self.assertEqual(view[1], (self.qn2, range(3, 5)))

    def test_to_dict(self):
        qn1, qn2 = CNZ4(1, 2), CNZ4(2, 3)
        qns = QNS('U', [qn1, qn2], [2, 3])
        self.assertEqual(qns.to_dict(), OrderedDict([(qn1, range(0, 2)), (qn2, range(2, 5))]))
        self.assertEqual(qns.to_dict('counts'), OrderedDict([(qn1, 2), (qn2, 3)]))
        with self.assertRaises(ValueError):
            QNS('G', [qn1, qn2, qn1], [1, 1, 1]).to_dict()

    def test_expand(self):
        np.testing.assert_array_equal(self.qns.expand('indices'), [0, 0, 0, 1, 1])
        self.assertEqual(self.qns.expand('contents'), [self.qn1] * 3 + [self.qn2] * 2)
        np.testing.assert_array_equal(self.qns.expanded_array(), [[1, 3]] * 3 + [[-1, 1]] * 2)
        with self.assertRaises(ValueError):
            self.qns.expand('values')

    def test_indexing(self):
        qns = self.qns
        self.assertEqual(qns[0], self.qn1)
        self.assertEqual(qns[-1], self.qn2)
        self.assertEqual(qns[0:2], qns)
        self.assertEqual(qns[1:], QNS('U', [self.qn2], [2]))
        self.assertEqual(qns[[1, 0]], QNS('G', [self.qn2, self.qn1], indptr=[0, 2, 5]))
        with self.assertRaises(IndexError):
            qns[2]

    def test_reversed_slice_of_canonical_is_unique(self):
        qns = QNS('C', [self.qn2, self.qn1], [2, 3])
        self.assertIs(qns[::-1].form, SortForm.UNIQUE)
        self.assertIs(qns[:1].form, SortForm.CANONICAL)

    def test_equality_includes_the_form(self):
        self.assertNotEqual(QNS('U', [self.qn1, self.qn2]), QNS('G', [self.qn1, self.qn2]))
        self.assertNotEqual(QNS('U', [self.qn1, self.qn2], [1, 2]), QNS('U', [self.qn1, self.qn2], [2, 1]))
        self.assertEqual(hash(QNS('U', [self.qn1], [2])), hash(QNS('U', [self.qn1], [2])))

# -----------------------------------------------------------------------------
#! Block search
# -----------------------------------------------------------------------------

def test_find_block_concrete_layout():
    # Arrange: positions 0-1 carry (1, 3), positions 2-4 carry (-1, 1)
    qns = QNS('U', [CNZ4(1, 3), CNZ4(-1, 1)], indptr=[0, 2, 5])

    # Act / Assert
    assert qns.find_block(3) == 1
    assert qns.range(0) == range(0, 2)
    for guess in range(-3, 6):
        assert qns.find_block(3, guess) == 1

@pytest.mark.parametrize("counts", [[1], [3, 1, 2], [1, 1, 1, 1, 1, 1, 1], [5, 2, 8, 1, 1, 4]])
def test_find_block_does_not_depend_on_the_guess(counts):
    # Arrange
    contents    = [CN(i) for i in range(len(counts))]
    qns         = QNS('C', contents, counts)
    expected    = qns.expand('indices')

    # Act / Assert
    for position in range(qns.dimension):
        for guess in range(len(counts)):
            assert qns.find_block(position, guess) == expected[position]
    np.testing.assert_array_equal(qns.find_blocks(np.arange(qns.dimension)), expected)
    np.testing.assert_array_equal(qns.find_blocks(np.arange(qns.dimension)[::-1]), expected[::-1])

def test_find_block_out_of_range():
    qns = QNS('C', [CN(0), CN(1)], [2, 2])
    with pytest.raises(IndexError):
        qns.find_block(4)
    with pytest.raises(IndexError):
        qns.find_block(-1)
    with pytest.raises(IndexError):
        qns.find_blocks([0, 9])

# -----------------------------------------------------------------------------
#! Arithmetic on block values
# -----------------------------------------------------------------------------

class TestSequenceArithmetic(unittest.TestCase):

    def setUp(self):
        self.qn1 = CNZ4(1, 2)
        self.qn2 = CNZ4(2, 3)
        self.qns = QNS('U', [self.qn1, self.qn2], indptr=[0, 2, 4])

    def test_sign_and_scalar(self):
        qns = self.qns
        self.assertIs(+qns, qns)
        self.assertEqual(-qns, QNS('U', [-self.qn1, -self.qn2], indptr=[0, 2, 4]))
        self.assertEqual(qns * 3, QNS('U', [self.qn1 * 3, self.qn2 * 3], indptr=[0, 2, 4]))
        self.assertEqual(3 * qns, qns * 3)

    def test_shift_by_quantum_number(self):
        qns, qn = self.qns, CNZ4(1, 3)
        self.assertEqual(qns + qn, QNS('U', [self.qn1 + qn, self.qn2 + qn], indptr=[0, 2, 4]))
        self.assertEqual(qn + qns, qns + qn)
        self.assertEqual(qns - qn, QNS('U', [self.qn1 - qn, self.qn2 - qn], indptr=[0, 2, 4]))
        self.assertEqual(qn - qns, QNS('U', [qn - self.qn1, qn - self.qn2], indptr=[0, 2, 4]))

    def test_form_degrades_when_values_collide(self):
        qns = QNS('C', [CNZ4(0, 0), CNZ4(0, 1)], [1, 2]) * 4
        self.assertIs(qns.form, SortForm.GENERAL)
        self.assertEqual(qns.contents, (CNZ4(0, 0), CNZ4(0, 0)))

    def test_form_degrades_when_order_breaks(self):
        qns = -QNS('C', [CNZ4(0, 1), CNZ4(1, 0)])
        self.assertIs(qns.form, SortForm.UNIQUE)
        self.assertEqual(qns.contents, (CNZ4(0, 3), CNZ4(-1, 0)))

    def test_power_is_repeated_kron(self):
        squared = self.qns ** 2
        self.assertEqual(squared, kron(self.qns, self.qns))
        self.assertEqual(squared.dimension, 16)
        self.assertEqual(len(squared), 4)
        self.assertEqual(self.qns ** 1, kron(self.qns))

    def test_derived_sequences_leave_the_source_untouched(self):
        before = repr(self.qns)
        _ = -self.qns, self.qns * 2, self.qns + CNZ4(1, 1)
        self.assertEqual(repr(self.qns), before)

# ----------------------------------------------------------------------------------------------------
#! End of test_sequences.py
# ----------------------------------------------------------------------------------------------------
