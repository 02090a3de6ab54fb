#!/usr/bin/env python3
"""
lwe_scheme.py - Single-party LWE public-key encryption (Regev style)

Parameters (per security parameter n):
- m = n³ samples, q = 2^n
- sk: s ∈ Z_q^n
- pk: (A, b = A·s + e), A ∈ Z_q^{m×n}, e small noise
- Enc(bit): pick a random half S of the rows,
    a = Σ_{i∈S} A[i],  b = bit·⌊q/2⌋ + Σ_{i∈S} b[i]
- Dec: v = b - <a, s> mod q, bit = 1 iff v ∈ (q/4, q - q/4)

The threshold protocol (participant.py / coordinator.py) reuses gen_a,
gen_b and encrypt from this module.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence, Tuple

from core.errors import InvalidPlaintext, ProtocolShapeViolation
from core.modular import dot, floor_mod, in_signal_band, vec_add, vec_zeros
from core.randomness import SystemRandomSource, rand_vector
from .noise_primitives import GaussianNoise, default_sigma


# ============================================================================
# PARAMETERS
# ============================================================================

LWE_PARAMS = {
    'toy': 4,     # m = 64, q = 16: only meaningful with ZeroNoise
    'test': 12,   # m = 1728, q = 4096
    'bench': 25,  # m = 15625, q = 2^25
}


@dataclass(frozen=True)
class SchemeParameters:
    """Security parameter n with derived m = n³ and q = 2^n. Immutable."""
    n: int
    m: int = field(init=False)
    q: int = field(init=False)

    def __post_init__(self):
        if self.n < 2:
            raise ValueError(f"Security parameter n must be >= 2, got {self.n}")
        object.__setattr__(self, 'm', self.n ** 3)
        object.__setattr__(self, 'q', 2 ** self.n)

    @classmethod
    def preset(cls, name: str) -> "SchemeParameters":
        if name not in LWE_PARAMS:
            raise ValueError(f"Unknown parameter preset {name!r}, choose from {sorted(LWE_PARAMS)}")
        return cls(LWE_PARAMS[name])

    @property
    def half_q(self) -> int:
        return self.q // 2

    @property
    def quarter_q(self) -> int:
        return self.q // 4

    @property
    def noise_sigma(self) -> float:
        return default_sigma(self.q)


# ============================================================================
# KEY / CIPHERTEXT TYPES
# ============================================================================

class PublicKey(NamedTuple):
    A: Tuple[Tuple[int, ...], ...]
    b: Tuple[int, ...]


class SecretKey(NamedTuple):
    s: Tuple[int, ...]


class Ciphertext(NamedTuple):
    a: Tuple[int, ...]
    b: int

    def to_bytes(self) -> bytes:
        """Big-endian bytes of every coordinate of a, then b (minimal length each)."""
        out = bytearray()
        for v in list(self.a) + [self.b]:
            out.extend(v.to_bytes(max(1, (v.bit_length() + 7) // 8), 'big'))
        return bytes(out)


def check_plaintext(bit) -> int:
    """Reject anything other than 0 / 1 (bools are accepted as ints)."""
    if not isinstance(bit, int) or bit not in (0, 1):
        raise InvalidPlaintext(f"Plaintext must be 0 or 1, got {bit!r}")
    return int(bit)


# ============================================================================
# SCHEME
# ============================================================================

class LweScheme:
    """
    LWE encryption of single bits.

    Attributes:
        params: SchemeParameters (n, m, q)
        rng: randomness source for s, A and the encryption subset
        noise: noise generator for e
    """

    def __init__(self, params, rng=None, noise=None):
        if isinstance(params, int):
            params = SchemeParameters(params)
        self.params = params
        self.rng = rng if rng is not None else SystemRandomSource()
        self.noise = noise if noise is not None else GaussianNoise(params.noise_sigma)

    @property
    def n(self) -> int:
        return self.params.n

    @property
    def m(self) -> int:
        return self.params.m

    @property
    def q(self) -> int:
        return self.params.q

    # ------------------------------------------------------------------
    # Key material
    # ------------------------------------------------------------------

    def gen_s(self) -> List[int]:
        return rand_vector(self.rng, self.n, self.n)

    def gen_a(self) -> List[List[int]]:
        """Public matrix A: m rows of n values, each of bit length n."""
        return [rand_vector(self.rng, self.n, self.n) for _ in range(self.m)]

    def gen_e(self, count: Optional[int] = None, noise=None) -> List[int]:
        noise = noise if noise is not None else self.noise
        return noise.sample_vector(self.m if count is None else count, self.q)

    def gen_b(self, A: Sequence[Sequence[int]], s: Sequence[int], e: Sequence[int]) -> List[int]:
        """
        b = A·s + e (mod q), row by row.

        Args:
            A: m × n matrix
            s: Secret vector (or one participant's share of it)
            e: Error vector of length m

        Returns:
            Vector b of length m
        """
        if len(A) != len(e):
            raise ProtocolShapeViolation(f"A has {len(A)} rows but e has {len(e)} entries")
        return [floor_mod(dot(row, s, self.q) + ei, self.q) for row, ei in zip(A, e)]

    def keygen(self) -> Tuple[PublicKey, SecretKey]:
        s = self.gen_s()
        A = self.gen_a()
        e = self.gen_e()
        b = self.gen_b(A, s, e)

        pk = PublicKey(tuple(tuple(row) for row in A), tuple(b))
        return pk, SecretKey(tuple(s))

    # ------------------------------------------------------------------
    # Encryption / decryption
    # ------------------------------------------------------------------

    def encrypt(self, pk: PublicKey, bit: int) -> Ciphertext:
        """
        Encrypt one bit under pk.

        Raises:
            InvalidPlaintext: bit not in {0, 1} (checked before any draw)
            ProtocolShapeViolation: pk does not match the parameters
        """
        bit = check_plaintext(bit)
        if len(pk.A) != self.m or len(pk.b) != self.m:
            raise ProtocolShapeViolation(
                f"Public key has {len(pk.A)} rows / {len(pk.b)} entries, expected {self.m}"
            )

        rows = list(range(self.m))
        self.rng.shuffle(rows)
        subset = rows[:self.m // 2]

        a = vec_zeros(self.n)
        acc = 0
        for i in subset:
            a = vec_add(a, pk.A[i], self.q)
            acc += pk.b[i]

        a = tuple(a)
        b = floor_mod(bit * self.params.half_q + acc, self.q)
        return Ciphertext(a, b)

    def decrypt(self, sk: SecretKey, c: Ciphertext) -> int:
        if len(sk.s) != self.n or len(c.a) != self.n:
            raise ProtocolShapeViolation(
                f"Secret key / ciphertext length {len(sk.s)} / {len(c.a)} != n={self.n}"
            )
        v = floor_mod(c.b - dot(c.a, sk.s, self.q), self.q)
        return 1 if in_signal_band(v, self.q) else 0
