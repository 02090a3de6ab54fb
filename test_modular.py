#!/usr/bin/env python3
"""
test_modular.py - Z_q arithmetic: floor-modulo normalization and signal band
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__)))

import pytest

from core.modular import (
    add, sub, mul, floor_mod, in_signal_band, centered,
    vec_add, vec_zeros, dot, matvec_mul,
)


def test_floor_mod_range():
    """Result in [0, q) for negative, zero and positive inputs."""
    for q in (2, 16, 4096, 2**25):
        for x in (-3 * q - 1, -q, -q + 1, -1, 0, 1, q - 1, q, 5 * q + 7):
            r = floor_mod(x, q)
            assert 0 <= r < q
            assert (x - r) % q == 0


def test_floor_mod_is_periodic():
    q = 2**12
    for x in (-12345, -1, 0, 7, 99999):
        for k in (-5, -1, 0, 1, 3):
            assert floor_mod(x, q) == floor_mod(x + k * q, q)


def test_floor_mod_negative_is_not_truncation():
    # A truncating remainder would give -3 here.
    assert floor_mod(-3, 16) == 13
    assert sub(2, 5, 16) == 13


def test_floor_mod_rejects_bad_modulus():
    with pytest.raises(ValueError):
        floor_mod(5, 0)
    with pytest.raises(ValueError):
        floor_mod(5, -16)


def test_ring_operations():
    q = 16
    assert add(9, 9, q) == 2
    assert sub(0, 1, q) == 15
    assert mul(5, 7, q) == 3
    assert mul(-1, 3, q) == 13


def test_signal_band_boundaries():
    """Open interval (q/4, q - q/4): both endpoints decode to 0."""
    q = 16
    assert not in_signal_band(4, q)
    assert not in_signal_band(12, q)
    assert in_signal_band(5, q)
    assert in_signal_band(8, q)
    assert in_signal_band(11, q)
    assert not in_signal_band(0, q)
    assert not in_signal_band(15, q)

    q = 2**12
    assert not in_signal_band(q // 4, q)
    assert not in_signal_band(q - q // 4, q)
    assert in_signal_band(q // 4 + 1, q)
    assert in_signal_band(q - q // 4 - 1, q)


def test_signal_band_reduces_input():
    q = 16
    assert in_signal_band(8 + 3 * q, q)
    assert not in_signal_band(-1, q)
    assert in_signal_band(-8, q)


def test_centered():
    q = 16
    assert centered(0, q) == 0
    assert centered(15, q) == -1
    assert centered(8, q) == 8
    assert centered(9, q) == -7


def test_vector_helpers():
    q = 16
    assert vec_zeros(3) == [0, 0, 0]
    assert vec_add([15, 1, 8], [1, 1, 8], q) == [0, 2, 0]
    assert dot([1, 2, 3], [4, 5, 6], q) == 32 % q
    assert matvec_mul([[1, 0], [0, 1], [3, 3]], [5, 7], q) == [5, 7, 36 % q]


def test_vector_length_mismatch():
    with pytest.raises(ValueError):
        vec_add([1, 2], [1], 16)
    with pytest.raises(ValueError):
        dot([1, 2], [1, 2, 3], 16)


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
