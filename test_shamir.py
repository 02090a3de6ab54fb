#!/usr/bin/env python3
"""
test_shamir.py - Shamir sharing and exact Lagrange interpolation
"""

import sys
import os
import random
from fractions import Fraction

sys.path.insert(0, os.path.join(os.path.dirname(__file__)))

import pytest

from core.errors import ShareCountMismatch
from core.randomness import DeterministicRandomSource
from modes.threshold_lwe.shamir_utils import (
    Share,
    eval_poly,
    interpolate,
    lagrange_coefficient,
    lagrange_coefficients_at_zero,
    reconstruct_secret,
    share_secret,
)


def test_eval_poly_horner():
    assert eval_poly([1, 2, 3], 2) == 17
    assert eval_poly([1, 2, 3], 2, 5) == 2
    assert eval_poly([], 9) == 0
    assert eval_poly([-4, 1], 3) == -1


def test_reconstruct_exact_over_integers():
    """Non-consecutive indices: L_j(0) are genuine fractions, result still exact."""
    rnd = random.Random(1234)
    for _ in range(20):
        secret = rnd.getrandbits(64)
        coeffs = [secret] + [rnd.getrandbits(64) for _ in range(3)]
        indices = [2, 5, 7, 11]
        shares = [Share(x, eval_poly(coeffs, x)) for x in indices]

        l = interpolate(shares)
        assert l.evaluate_exact(0) == secret
        assert l(0) == secret


def test_reconstruct_mod_q_full_committee():
    q = 2**16
    rng = DeterministicRandomSource(7)
    for N in (1, 2, 3, 5, 10):
        secret = rng.randbits(16)
        shares = share_secret(secret, list(range(1, N + 1)), N - 1, q, rng)
        assert reconstruct_secret(shares, q, expected_count=N) == secret


def test_interpolation_insensitive_to_order():
    rnd = random.Random(99)
    coeffs = [rnd.getrandbits(40) for _ in range(5)]
    shares = [Share(x, eval_poly(coeffs, x)) for x in range(1, 6)]

    expected = interpolate(shares)
    for _ in range(10):
        shuffled = shares[:]
        rnd.shuffle(shuffled)
        l = interpolate(shuffled)
        for x in (0, 3, 17):
            assert l(x) == expected(x)


def test_interpolant_owns_its_shares():
    shares = [Share(1, 10), Share(2, 20), Share(3, 30)]
    l = interpolate(shares)
    before = l(0)
    shares[0] = Share(1, 999)
    shares.append(Share(4, 1))
    assert l(0) == before == 0
    assert len(l) == 3


def test_interpolant_evaluates_anywhere():
    coeffs = [42, 5, 7]
    shares = [Share(x, eval_poly(coeffs, x)) for x in (1, 2, 3)]
    l = interpolate(shares)
    for x in (0, 4, 10, -3):
        assert l(x) == eval_poly(coeffs, x)


def test_non_integral_value_is_floored():
    l = interpolate([Share(1, 0), Share(3, 1)])
    assert l.evaluate_exact(2) == Fraction(1, 2)
    assert l(2) == 0
    l = interpolate([Share(1, 0), Share(3, -1)])
    assert l(2) == -1


def test_consecutive_anchors_give_integers():
    """Anchors at 0..d make the interpolant integer-valued on all integers."""
    rnd = random.Random(5)
    anchors = [Share(0, -7)] + [Share(k, rnd.getrandbits(20)) for k in (1, 2, 3)]
    l = interpolate(anchors)
    for x in range(-5, 30):
        assert l.evaluate_exact(x).denominator == 1


def test_fewer_shares_silently_wrong():
    """Sharp edge: one share short of degree + 1 gives a plausible wrong value."""
    coeffs = [42, 5, 7, 3]
    shares = [Share(x, eval_poly(coeffs, x)) for x in (1, 2, 3)]
    assert interpolate(shares)(0) != 42
    assert interpolate(shares)(0) == 42 + 6 * 3


def test_expected_count_enforced():
    shares = [Share(1, 5), Share(2, 6)]
    with pytest.raises(ShareCountMismatch):
        interpolate(shares, expected_count=3)
    assert interpolate(shares, expected_count=2)(0) == 4


def test_duplicate_indices_rejected():
    with pytest.raises(ShareCountMismatch):
        interpolate([Share(1, 5), Share(1, 6), Share(2, 7)])
    with pytest.raises(ValueError):
        interpolate([(3, 1), (3, 1)])


def test_empty_share_set_rejected():
    with pytest.raises(ShareCountMismatch):
        interpolate([])


def test_lagrange_coefficients_full_committee():
    assert lagrange_coefficients_at_zero([1, 2, 3]) == {1: 3, 2: -3, 3: 1}
    for N in range(1, 11):
        lams = lagrange_coefficients_at_zero(list(range(1, N + 1)))
        assert sum(lams.values()) == 1


def test_lagrange_coefficients_non_integral():
    assert lagrange_coefficient(0, [2, 5], 0) == Fraction(5, 3)
    with pytest.raises(ValueError):
        lagrange_coefficients_at_zero([2, 5])


def test_share_secret_rejects_index_zero():
    with pytest.raises(ValueError):
        share_secret(5, [0, 1, 2], 1, 16, DeterministicRandomSource(1))


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
