"""
Tests for the bounded decomposition solver.

File        : test/test_decomposition.py
Description : Exhaustive order, randomized subsets, reproducibility, configuration and error paths.
Author      : Maksymilian Kliczkowski
Date        : 2025-11-09
"""

import itertools
import logging
import unittest

import numpy as np
import pytest

from QAN.qan_config import DecompositionConfig
from QAN.qan_globals import reseed_all
from QAN.Numbers.base import INF, QuantumNumberSpec
from QAN.Numbers.errors import IncompatiblePeriod
from QAN.Numbers.sequence import AbelianNumberSequence
from QAN.Numbers.decomposition import DecompositionMethod, decompose
from QAN.Numbers.concrete import ParticleNumber, Momentum1

CNZ4    = QuantumNumberSpec("CNZ4", ("N", "Z"), (INF, 4))
QNS     = AbelianNumberSequence

ALL_SOLUTIONS = [
    (0, 0, 1, 1),
    (0, 1, 0, 1),
    (0, 1, 1, 0),
    (1, 0, 0, 1),
    (1, 0, 1, 0),
    (1, 1, 0, 0),
]

def _brute_reference(target, sequences, signs):
    ''' Plain enumeration used as the oracle. '''
    flats   = [seq.expand('contents') for seq in sequences]
    out     = []
    for idx in itertools.product(*(range(len(f)) for f in flats)):
        total = None
        for f, i, s in zip(flats, idx, signs):
            term    = f[i] if s > 0 else -f[i]
            total   = term if total is None else total + term
        if total == target:
            out.append(idx)
    return out

class TestBruteforce(unittest.TestCase):

    def setUp(self):
        self.qns    = QNS('U', [CNZ4(0, 0), CNZ4(1, 1)], indptr=[0, 1, 2])
        self.target = CNZ4(2, 2)

    def test_all_solutions_in_lexicographic_order(self):
        result = decompose(self.target, self.qns, self.qns, self.qns, self.qns, nmax=10, method='bruteforce')
        self.assertEqual(result, ALL_SOLUTIONS)

    def test_nmax_takes_the_first_solutions(self):
        result = decompose(self.target, self.qns, self.qns, self.qns, self.qns, nmax=3)
        self.assertEqual(result, ALL_SOLUTIONS[:3])

    def test_nmax_zero(self):
        self.assertEqual(decompose(self.target, self.qns, self.qns, nmax=0), [])

    def test_unreachable_target(self):
        self.assertEqual(decompose(CNZ4(5, 0), self.qns, self.qns, self.qns, self.qns, nmax=10), [])

    def test_signs(self):
        result = decompose(CNZ4.zero(), self.qns, self.qns, signs=(+1, -1), nmax=10)
        self.assertEqual(result, [(0, 0), (1, 1)])

    def test_bare_quantum_number_factor(self):
        result = decompose(CNZ4(1, 1), CNZ4(1, 1), self.qns, nmax=10)
        self.assertEqual(result, [(0, 0)])

    def test_matches_plain_enumeration(self):
        N       = ParticleNumber
        a       = QNS('G', [N(0), N(1), N(2), N(1)], [2, 1, 3, 1])
        b       = QNS('C', [N(-1), N(0), N(3)], [1, 2, 2])
        signs   = (+1, -1, +1)
        target  = N(2)
        result  = decompose(target, a, b, a, signs=signs, nmax=10_000)
        self.assertEqual(result, _brute_reference(target, [a, b, a], signs))

    def test_finite_components_wrap(self):
        M       = Momentum1(5)
        qns     = QNS('C', [M(0), M(2), M(4)])
        result  = decompose(M(1), qns, qns, nmax=100)
        # 2 + 4 = 6 = 1 (mod 5)
        self.assertEqual(result, [(1, 2), (2, 1)])

class TestMontecarlo(unittest.TestCase):

    def setUp(self):
        self.qns    = QNS('U', [CNZ4(0, 0), CNZ4(1, 1)], indptr=[0, 1, 2])
        self.target = CNZ4(2, 2)
        self.args   = (self.target, self.qns, self.qns, self.qns, self.qns)

    def test_results_are_distinct_valid_solutions(self):
        result = decompose(*self.args, nmax=10, method='montecarlo', seed=1234)
        self.assertTrue(set(result) <= set(ALL_SOLUTIONS))
        self.assertEqual(len(result), len(set(result)))
        self.assertGreater(len(result), 0)

    def test_nmax_bounds_the_result(self):
        result = decompose(*self.args, nmax=2, method='montecarlo', seed=7)
        self.assertLessEqual(len(result), 2)

    def test_seed_reproducibility(self):
        first   = decompose(*self.args, nmax=4, method='montecarlo', seed=99)
        second  = decompose(*self.args, nmax=4, method='montecarlo', seed=99)
        self.assertEqual(first, second)

    def test_explicit_generator(self):
        first   = decompose(*self.args, nmax=4, method='montecarlo', rng=np.random.default_rng(3))
        second  = decompose(*self.args, nmax=4, method='montecarlo', rng=np.random.default_rng(3))
        self.assertEqual(first, second)

    def test_global_generator(self):
        reseed_all(11)
        first   = decompose(*self.args, nmax=4, method='montecarlo')
        reseed_all(11)
        second  = decompose(*self.args, nmax=4, method='montecarlo')
        self.assertEqual(first, second)

    def test_unreachable_target_exhausts_the_budget(self):
        result = decompose(CNZ4(5, 0), *self.args[1:], nmax=3, method='montecarlo', seed=0, max_samples=500, batch_size=64)
        self.assertEqual(result, [])

    def test_config_object(self):
        config  = DecompositionConfig(method='montecarlo', nmax=2, seed=5)
        first   = decompose(*self.args, config=config)
        second  = decompose(*self.args, config=config)
        self.assertEqual(first, second)
        self.assertLessEqual(len(first), 2)
        # explicit keywords win over the config
        self.assertEqual(decompose(*self.args, config=config, method='bruteforce'), ALL_SOLUTIONS[:2])

    def test_explicit_none_seed_clears_the_config_seed(self):
        config  = DecompositionConfig(method='montecarlo', nmax=4, seed=5)
        reseed_all(11)
        cleared = decompose(*self.args, config=config, seed=None)
        reseed_all(11)
        plain   = decompose(*self.args, nmax=4, method='montecarlo')
        self.assertEqual(cleared, plain)
        self.assertEqual(decompose(*self.args, config=config), decompose(*self.args, nmax=4, method='montecarlo', seed=5))

    def test_automatic_budget_follows_the_effective_nmax(self):
        logger  = logging.getLogger("QAN.test.decomposition")
        config  = DecompositionConfig(method='montecarlo', nmax=3, seed=0, max_samples=100)
        target  = CNZ4(5, 0)
        with self.assertLogs(logger, level='INFO') as logs:
            decompose(target, *self.args[1:], config=config, logger=logger)
            decompose(target, *self.args[1:], config=config, max_samples=None, logger=logger)
            decompose(target, *self.args[1:], config=config, max_samples=None, nmax=50, logger=logger)
        drawn = [int(line.split("after ")[1].split(" draws")[0]) for line in logs.output]
        self.assertEqual(drawn, [100, 10_000, 50_000])

# -----------------------------------------------------------------------------
#! Errors
# -----------------------------------------------------------------------------

@pytest.fixture
def small_sequence():
    return QNS('U', [CNZ4(0, 0), CNZ4(1, 1)])

def test_wrong_number_of_signs(small_sequence):
    with pytest.raises(ValueError):
        decompose(CNZ4(1, 1), small_sequence, small_sequence, signs=(1,))

def test_incompatible_target(small_sequence):
    CNZ5 = QuantumNumberSpec("CNZ5", ("N", "Z"), (INF, 5))
    with pytest.raises(IncompatiblePeriod):
        decompose(CNZ5(1, 1), small_sequence)

def test_unknown_method(small_sequence):
    with pytest.raises(ValueError):
        decompose(CNZ4(1, 1), small_sequence, method='annealing')

def test_negative_nmax(small_sequence):
    with pytest.raises(ValueError):
        decompose(CNZ4(1, 1), small_sequence, nmax=-1)

def test_target_type(small_sequence):
    with pytest.raises(TypeError):
        decompose((1, 1), small_sequence)

@pytest.mark.parametrize("name, member", [("bruteforce", DecompositionMethod.BRUTEFORCE),
                                          ("MonteCarlo", DecompositionMethod.MONTECARLO)])
def test_method_from_string(name, member):
    assert DecompositionMethod.from_string(name) is member
    assert DecompositionMethod.from_string(member) is member

# ----------------------------------------------------------------------------------------------------
#! End of test_decomposition.py
# ----------------------------------------------------------------------------------------------------
