#!/usr/bin/env python3
"""
noise_primitives.py - Error-term sampling for LWE

Implements the pluggable noise generator used for the error vector e in
b = A·s + e:
- GaussianNoise: rounded Gaussian N(0, σ²), σ = q^{1/4} by default
- ZeroNoise: always 0. TESTING ONLY - makes keygen deterministic but the
  resulting keys are not LWE instances at all.
"""

import sys
from typing import List, Optional

import numpy as np

from core.modular import floor_mod


def default_sigma(q: int) -> float:
    """Spread q^{1/4}: grows sub-linearly in q."""
    return float(q) ** 0.25


class GaussianNoise:
    """
    Discrete (rounded) Gaussian noise centered at 0.

    Algorithm:
    1. Sample from continuous Gaussian N(0, σ²)
    2. Round to nearest integer
    """

    is_secure = True

    def __init__(self, sigma: float, seed: Optional[int] = None):
        if sigma < 0:
            raise ValueError(f"sigma must be non-negative, got {sigma}")
        self.sigma = sigma
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def scaled(self, factor: float) -> "GaussianNoise":
        """Same distribution family with spread σ·factor and an independent stream."""
        seed = None
        if self.seed is not None:
            seed = int(self._rng.integers(0, 2**63 - 1))
        return GaussianNoise(self.sigma * factor, seed=seed)

    def sample(self) -> int:
        return int(round(self._rng.normal(0.0, self.sigma)))

    def sample_vector(self, count: int, q: int) -> List[int]:
        """
        Sample `count` values and reduce each into [0, q).

        Args:
            count: Number of samples (m for a full error vector)
            q: Modulus

        Returns:
            List of noise values mod q
        """
        if count == 0:
            return []
        samples = np.rint(self._rng.normal(0.0, self.sigma, count))
        return [floor_mod(int(c), q) for c in samples]


class ZeroNoise:
    """Zero-output stub for deterministic tests. NOT cryptographically meaningful."""

    is_secure = False
    sigma = 0.0

    def __init__(self, quiet: bool = False):
        if not quiet:
            print("[NOISE] WARNING: zero-noise fallback in use, all values of e are 0 "
                  "(testing only, not secure)", file=sys.stderr)

    def scaled(self, factor: float) -> "ZeroNoise":
        return self

    def sample(self) -> int:
        return 0

    def sample_vector(self, count: int, q: int) -> List[int]:
        return [0] * count
