#!/usr/bin/env python3
"""
shamir_utils.py - Shamir Secret Sharing Utilities for threshold LWE

Implements coordinate-wise Shamir sharing for LWE secret vectors.

- Secret sharing: y_i = f(i) where f(x) = s + a₁·x + ... + a_d·x^d
- Lagrange interpolation: f(x) = Σ y_j · L_j(x),
  L_j(x) = Π_{m≠j} (x - x_m)/(x_j - x_m)

The modulus q = 2^n is not prime, so denominators (x_j - x_m) are generally
not invertible mod q. L_j(x) is therefore computed as an exact Fraction and
the integer result is taken once, at the end. For the committee indices
1..N the coefficients at x=0 are the integers (-1)^{j-1}·C(N, j), which is
what lets interpolation at 0 commute with reduction mod q.
"""

import math
from fractions import Fraction
from functools import lru_cache
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from core.errors import ShareCountMismatch
from core.modular import floor_mod


class Share(NamedTuple):
    """One evaluation point (index, value) of an implicit polynomial."""
    index: int
    value: int


# ============================================================================
# POLYNOMIAL EVALUATION
# ============================================================================

def eval_poly(coeffs: Sequence[int], x: int, q: Optional[int] = None) -> int:
    """
    Evaluate polynomial at point x (over Z, or Z_q when q is given).

    P(x) = coeffs[0] + coeffs[1]*x + coeffs[2]*x^2 + ...

    Uses Horner's method:
    P(x) = coeffs[0] + x*(coeffs[1] + x*(coeffs[2] + ...))

    Args:
        coeffs: Polynomial coefficients [c0, c1, c2, ...]
        x: Evaluation point
        q: Optional modulus

    Returns:
        P(x), reduced mod q if q is given
    """
    if not coeffs:
        return 0

    result = coeffs[-1]
    for i in range(len(coeffs) - 2, -1, -1):
        result = result * x + coeffs[i]
        if q is not None:
            result = floor_mod(result, q)

    if q is not None:
        result = floor_mod(result, q)
    return result


# ============================================================================
# LAGRANGE COEFFICIENTS
# ============================================================================

@lru_cache(maxsize=4096)
def _basis(indices: Tuple[int, ...], j: int, x: int) -> Fraction:
    xj = indices[j]
    res = Fraction(1)
    for m, xm in enumerate(indices):
        if m == j:
            continue
        res *= Fraction(x - xm, xj - xm)
    return res


def lagrange_coefficient(j: int, indices: Sequence[int], x: int = 0) -> Fraction:
    """
    Exact Lagrange basis value L_j(x) for the j-th index of `indices`.

    Args:
        j: Position (not value) of the index inside `indices`
        indices: All evaluation points of the share set
        x: Evaluation point

    Returns:
        L_j(x) as a Fraction
    """
    return _basis(tuple(indices), j, x)


def lagrange_coefficients_at_zero(indices: Sequence[int]) -> Dict[int, int]:
    """
    Integer Lagrange coefficients λ_i = L_i(0) for a committee.

    Raises:
        ValueError: if some coefficient is not an integer (index set other
            than a full committee 1..N)
    """
    _check_unique(indices)
    coeffs = {}
    for j, idx in enumerate(indices):
        lam = lagrange_coefficient(j, indices, 0)
        if lam.denominator != 1:
            raise ValueError(f"Lagrange coefficient of index {idx} at 0 is not integral: {lam}")
        coeffs[idx] = lam.numerator
    return coeffs


# ============================================================================
# LAGRANGE INTERPOLATION (Reconstruction)
# ============================================================================

def _check_unique(indices: Sequence[int]) -> None:
    if len(set(indices)) != len(indices):
        raise ShareCountMismatch(f"Duplicate share indices: {sorted(indices)}")


class Interpolant:
    """
    Lazy evaluator for the polynomial through a share set.

    The share set is copied at construction so later mutation of the
    caller's list cannot change the result.
    """

    def __init__(self, shares: Iterable[Tuple[int, int]], expected_count: Optional[int] = None):
        self.shares = tuple(Share(int(i), int(v)) for i, v in shares)

        if not self.shares:
            raise ShareCountMismatch("Cannot interpolate an empty share set")
        if expected_count is not None and len(self.shares) != expected_count:
            raise ShareCountMismatch(
                f"Expected {expected_count} shares, got {len(self.shares)}"
            )
        _check_unique([s.index for s in self.shares])

        # Sorted so that permutations of the same share set hit the same
        # cached basis values.
        self.shares = tuple(sorted(self.shares))
        self.indices = tuple(s.index for s in self.shares)

    def __len__(self) -> int:
        return len(self.shares)

    def evaluate_exact(self, x: int) -> Fraction:
        """Σ_j y_j · L_j(x) over the rationals."""
        res = Fraction(0)
        for j, share in enumerate(self.shares):
            res += _basis(self.indices, j, x) * share.value
        return res

    def evaluate(self, x: int) -> int:
        """Integer value at x (floor of the exact rational)."""
        return math.floor(self.evaluate_exact(x))

    def __call__(self, x: int) -> int:
        return self.evaluate(x)


def interpolate(shares: Iterable[Tuple[int, int]], expected_count: Optional[int] = None) -> Interpolant:
    """
    Build the interpolant x ↦ f(x) through `shares`.

    Reconstruction is only exact when len(shares) equals the polynomial
    degree plus one; pass `expected_count` to enforce the committee size.

    Args:
        shares: Iterable of (index, value) pairs with unique indices
        expected_count: Required number of shares, or None

    Returns:
        Interpolant (call it with the evaluation point)

    Raises:
        ShareCountMismatch: duplicate indices, empty set or wrong count
    """
    return Interpolant(shares, expected_count=expected_count)


def reconstruct_secret(shares: Iterable[Tuple[int, int]], q: int,
                       expected_count: Optional[int] = None) -> int:
    """
    Reconstruct f(0) mod q from Shamir shares.

    Args:
        shares: (index, value) pairs
        q: Modulus
        expected_count: Required number of shares, or None

    Returns:
        f(0) mod q
    """
    return floor_mod(interpolate(shares, expected_count)(0), q)


# ============================================================================
# SHAMIR SECRET SHARING (Coordinate-wise for LWE vectors)
# ============================================================================

def create_shamir_polynomial(secret: int, degree: int, rng, bits: int) -> List[int]:
    """
    Create random polynomial f(x) = secret + a₁·x + ... + a_d·x^d

    Args:
        secret: Constant term (the secret to share)
        degree: d (number of random coefficients)
        rng: Randomness source (randbits)
        bits: Bit length of each random coefficient

    Returns:
        List of coefficients [secret, a₁, ..., a_d]
    """
    return [secret] + [rng.randbits(bits) for _ in range(degree)]


def share_secret(secret: int, indices: Sequence[int], degree: int, q: int, rng,
                 bits: Optional[int] = None) -> List[Share]:
    """
    Deal Shamir shares of `secret` to every index.

    Args:
        secret: Value to share
        indices: Recipient indices (participant numbers, all non-zero)
        degree: Polynomial degree (≤ len(indices) - 1 for exact reconstruction)
        q: Modulus
        rng: Randomness source
        bits: Coefficient bit length (defaults to q.bit_length() - 1)

    Returns:
        List of Share(index, f(index) mod q)
    """
    _check_unique(indices)
    if 0 in indices:
        raise ValueError("Index 0 is reserved for the secret")
    if bits is None:
        bits = q.bit_length() - 1

    coeffs = create_shamir_polynomial(secret, degree, rng, bits)
    return [Share(idx, eval_poly(coeffs, idx, q)) for idx in indices]
