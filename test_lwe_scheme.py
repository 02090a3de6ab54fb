#!/usr/bin/env python3
"""
test_lwe_scheme.py - Single-party LWE: keygen, encrypt, decrypt
"""

import sys
import os
import dataclasses

sys.path.insert(0, os.path.join(os.path.dirname(__file__)))

import pytest

from core.errors import InvalidPlaintext, ProtocolShapeViolation
from core.modular import centered, matvec_mul
from core.randomness import DeterministicRandomSource
from modes.threshold_lwe.lwe_scheme import (
    LWE_PARAMS, Ciphertext, LweScheme, SchemeParameters, SecretKey,
)
from modes.threshold_lwe.noise_primitives import GaussianNoise, ZeroNoise, default_sigma


def test_scheme_parameters():
    p = SchemeParameters(4)
    assert (p.n, p.m, p.q) == (4, 64, 16)
    assert p.half_q == 8
    assert p.quarter_q == 4
    assert p.noise_sigma == pytest.approx(2.0)

    assert SchemeParameters.preset('test').n == LWE_PARAMS['test']


def test_scheme_parameters_immutable():
    p = SchemeParameters(6)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.n = 7


def test_scheme_parameters_validation():
    with pytest.raises(ValueError):
        SchemeParameters(1)
    with pytest.raises(ValueError):
        SchemeParameters.preset('huge')


def test_keygen_shapes():
    crypto = LweScheme(6, rng=DeterministicRandomSource(1), noise=ZeroNoise(quiet=True))
    pk, sk = crypto.keygen()

    assert len(sk.s) == 6
    assert len(pk.A) == 216 and all(len(row) == 6 for row in pk.A)
    assert len(pk.b) == 216
    assert all(0 <= v < 64 for v in sk.s)
    assert all(0 <= v < 64 for row in pk.A for v in row)
    assert all(0 <= v < 64 for v in pk.b)


def test_zero_noise_keygen_is_exact():
    crypto = LweScheme(8, rng=DeterministicRandomSource(2), noise=ZeroNoise(quiet=True))
    pk, sk = crypto.keygen()
    assert list(pk.b) == matvec_mul(pk.A, sk.s, crypto.q)


def test_gaussian_keygen_error_is_small():
    params = SchemeParameters(12)
    crypto = LweScheme(params, rng=DeterministicRandomSource(3),
                       noise=GaussianNoise(params.noise_sigma, seed=3))
    pk, sk = crypto.keygen()

    As = matvec_mul(pk.A, sk.s, params.q)
    errors = [centered(b - v, params.q) for b, v in zip(pk.b, As)]
    assert max(abs(e) for e in errors) < 10 * params.noise_sigma
    assert any(e != 0 for e in errors)


def test_round_trip_zero_noise_always_correct():
    crypto = LweScheme(8, rng=DeterministicRandomSource(4), noise=ZeroNoise(quiet=True))
    pk, sk = crypto.keygen()
    for _ in range(100):
        for bit in (0, 1):
            assert crypto.decrypt(sk, crypto.encrypt(pk, bit)) == bit


def test_round_trip_gaussian_noise():
    """≥ 99% correct over 1000 trials with nonzero noise."""
    params = SchemeParameters(12)
    rng = DeterministicRandomSource(5)
    crypto = LweScheme(params, rng=rng, noise=GaussianNoise(params.noise_sigma, seed=5))
    pk, sk = crypto.keygen()

    correct = 0
    trials = 1000
    for i in range(trials):
        bit = i % 2
        correct += int(crypto.decrypt(sk, crypto.encrypt(pk, bit)) == bit)
    assert correct / trials >= 0.99


def test_ciphertext_shape():
    crypto = LweScheme(6, rng=DeterministicRandomSource(6), noise=ZeroNoise(quiet=True))
    pk, sk = crypto.keygen()
    c = crypto.encrypt(pk, 1)
    assert isinstance(c, Ciphertext)
    assert len(c.a) == 6
    assert all(0 <= v < 64 for v in c.a)
    assert 0 <= c.b < 64


def test_encrypt_rejects_malformed_plaintext_without_drawing():
    rng = DeterministicRandomSource(7)
    crypto = LweScheme(4, rng=rng, noise=ZeroNoise(quiet=True))
    pk, _ = crypto.keygen()

    draws = rng.draw_count
    for bad in (2, -1, '1', 0.5, None, 16):
        with pytest.raises(InvalidPlaintext):
            crypto.encrypt(pk, bad)
    assert rng.draw_count == draws

    with pytest.raises(ValueError):
        crypto.encrypt(pk, 3)


def test_encrypt_accepts_bool():
    crypto = LweScheme(6, rng=DeterministicRandomSource(8), noise=ZeroNoise(quiet=True))
    pk, sk = crypto.keygen()
    assert crypto.decrypt(sk, crypto.encrypt(pk, True)) == 1


def test_decrypt_shape_mismatch():
    crypto = LweScheme(4, rng=DeterministicRandomSource(9), noise=ZeroNoise(quiet=True))
    pk, sk = crypto.keygen()
    with pytest.raises(ProtocolShapeViolation):
        crypto.decrypt(SecretKey((1, 2, 3)), crypto.encrypt(pk, 0))
    with pytest.raises(ProtocolShapeViolation):
        crypto.decrypt(sk, Ciphertext((1, 2), 3))


def test_deterministic_source_reproduces_keys():
    pk1, sk1 = LweScheme(5, rng=DeterministicRandomSource(10), noise=ZeroNoise(quiet=True)).keygen()
    pk2, sk2 = LweScheme(5, rng=DeterministicRandomSource(10), noise=ZeroNoise(quiet=True)).keygen()
    assert pk1 == pk2 and sk1 == sk2


def test_ciphertext_bytes():
    c1 = Ciphertext((1, 0, 300), 7)
    assert c1.to_bytes() == bytes([1, 0, 1, 44, 7])
    assert c1.to_bytes() != Ciphertext((1, 0, 300), 8).to_bytes()


def test_zero_noise_warns(capsys):
    ZeroNoise()
    assert 'WARNING' in capsys.readouterr().err
    assert not ZeroNoise(quiet=True).is_secure


def test_default_sigma():
    assert default_sigma(2**12) == pytest.approx(8.0)
    assert GaussianNoise(3.0, seed=1).scaled(0.5).sigma == pytest.approx(1.5)
    with pytest.raises(ValueError):
        GaussianNoise(-1.0)


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
