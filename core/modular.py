#!/usr/bin/env python3
"""
modular.py - Integer arithmetic modulo q for LWE

Định nghĩa toán học:
- Z_q: integers modulo q (q = 2^n for the LWE scheme)
- Canonical representative: every value is kept in [0, q)
- Vectors are plain lists/tuples of ints, matrices are lists of rows
  - A (matrix) → A
  - s (vector) → s or vec
  - A·s (matvec) → matvec_mul(A, s, q)

floor_mod() is Python's % operator: the result takes the sign of the
divisor, never of the dividend, so b - a·s stays in [0, q) even when the
subtraction goes negative.
"""
from typing import List, Sequence


# =============================
# SCALAR OPERATIONS (Z_q)
# =============================

def floor_mod(x: int, q: int) -> int:
    """
    Floor-based modulo: result always lies in [0, q).

    Args:
        x: Any integer (negative, zero or positive)
        q: Modulus (> 0)

    Returns:
        x - q·⌊x/q⌋
    """
    if q <= 0:
        raise ValueError(f"Modulus must be positive, got {q}")
    return x % q


def add(x: int, y: int, q: int) -> int:
    return floor_mod(x + y, q)


def sub(x: int, y: int, q: int) -> int:
    return floor_mod(x - y, q)


def mul(x: int, y: int, q: int) -> int:
    return floor_mod(x * y, q)


def in_signal_band(x: int, q: int) -> bool:
    """
    Bit recovery decision rule.

    A noisy value centered at 0 decodes to bit 0, one centered at q/2 decodes
    to bit 1. The band is the open interval (⌊q/4⌋, q - ⌊q/4⌋): both endpoints
    decode to 0.

    Args:
        x: Value to classify (reduced mod q first)
        q: Modulus

    Returns:
        True iff x lies strictly inside the band
    """
    x = floor_mod(x, q)
    lower = q // 4
    upper = q - lower
    return lower < x < upper


def centered(x: int, q: int) -> int:
    """Map x mod q to (-q/2, q/2] (for noise diagnostics)."""
    x = floor_mod(x, q)
    if x > q // 2:
        return x - q
    return x


# =============================
# VECTOR OPERATIONS (Z_q^k)
# =============================

def vec_zeros(k: int) -> List[int]:
    return [0] * k


def vec_add(a: Sequence[int], b: Sequence[int], q: int) -> List[int]:
    """
    Vector addition in Z_q^k: a + b.

    Args:
        a: Vector of k integers
        b: Vector of k integers
        q: Modulus

    Returns:
        a + b (componentwise, mod q)
    """
    if len(a) != len(b):
        raise ValueError(f"Vector length mismatch: {len(a)} vs {len(b)}")
    return [floor_mod(ai + bi, q) for ai, bi in zip(a, b)]


def dot(u: Sequence[int], v: Sequence[int], q: int) -> int:
    """
    Inner product <u, v> mod q.

    The sum is accumulated over the integers and reduced once; Python ints
    never overflow.
    """
    if len(u) != len(v):
        raise ValueError(f"Vector length mismatch: {len(u)} vs {len(v)}")
    return floor_mod(sum(ui * vi for ui, vi in zip(u, v)), q)


# =============================
# MATRIX OPERATIONS
# =============================

def matvec_mul(A: Sequence[Sequence[int]], s: Sequence[int], q: int) -> List[int]:
    """
    Matrix-vector multiplication: A·s mod q.

    Args:
        A: m × n matrix (list of m rows)
        s: Vector of length n
        q: Modulus

    Returns:
        Vector of length m where entry i = <A[i], s> mod q
    """
    return [dot(row, s, q) for row in A]
