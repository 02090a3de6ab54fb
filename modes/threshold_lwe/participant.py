#!/usr/bin/env python3
"""
participant.py - One committee member of the threshold LWE protocol

ARCHITECTURE: the secret key s is never assembled. Participant i only holds
its coordinate-wise Shamir shares s_i, with s = Σ λ_i·s_i (λ_i = L_i(0)).

KEY GENERATION (driven by the Coordinator):
-------------------------------------------
1. contribute_key_share(): one random value per coordinate of s
2. receive_secret_share(): install the coordinate shares → state Ready
3. contribute_blinding_key() / receive_blinding_key(): pairwise keys k_ij
4. gen_error() + contribute_error_share(): re-share each local error sample
5. combine_error(): ε_i[row] = Σ_j f_j(i)  (sum of the received re-shares)
6. compute_partial_public_value(): b_i = A·s_i + ε_i

Since λ is integral for the committee 1..N, Σ λ_i·b_i = A·s + Σ_j e_j mod q.

DECRYPTION:
-----------
- partial_decrypt(c): (i, x_i + b - <a, s_i>)
- combine(shares):    Σ λ_i·(x_i + b - <a, s_i>) = b - <a, s> + Σ λ_i·x_i

The masks x_i are built from pairwise keys so that Σ λ_i·x_i = 0 exactly:
    x_i = Σ_{j≠i} sign(i, j)·λ_j·derive_mask(c, k_ij),  sign = +1 if i < j else -1
"""

import hashlib
import math
import random
import sys
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from core.errors import ProtocolShapeViolation, ShareCountMismatch, UninitializedSecretMaterial
from core.modular import dot, floor_mod, in_signal_band
from core.randomness import SystemRandomSource
from .lwe_scheme import Ciphertext, LweScheme, SchemeParameters
from .noise_primitives import GaussianNoise
from .shamir_utils import Share, interpolate, lagrange_coefficients_at_zero


# ============================================================================
# SECRET-KEY STATE (Uninitialized | Ready)
# ============================================================================

class Uninitialized:
    """No secret-key share yet: key generation has not completed."""

    def __repr__(self):
        return 'Uninitialized()'


class Ready(NamedTuple):
    shares: Tuple[int, ...]


UNINITIALIZED = Uninitialized()


# ============================================================================
# MASK DERIVATION
# ============================================================================

def derive_seed(ciphertext_bytes: bytes, blinding_key: int) -> int:
    """
    Seed = SHA3-256(ciphertext_bytes || key_bytes), as an integer.

    Args:
        ciphertext_bytes: Ciphertext.to_bytes()
        blinding_key: Private blinding value

    Returns:
        256-bit seed
    """
    key_bytes = blinding_key.to_bytes(max(1, (blinding_key.bit_length() + 7) // 8), 'big')
    digest = hashlib.sha3_256(ciphertext_bytes + key_bytes).digest()
    return int.from_bytes(digest, 'big')


def derive_mask(ciphertext_bytes: bytes, blinding_key: int, n: int, q: int) -> int:
    """
    Deterministic pseudo-random value of bit length n for (ciphertext, key).

    A fresh random.Random is seeded per call, so no generator state is
    shared between participants or ciphertexts.
    """
    rng = random.Random(derive_seed(ciphertext_bytes, blinding_key))
    return floor_mod(rng.getrandbits(n), q)


# ============================================================================
# PARTICIPANT
# ============================================================================

class Participant:
    """
    Committee member i.

    Attributes:
        number: Participant number (1..N), also its Shamir index
        params: SchemeParameters shared read-only with the committee
        committee_size: N
        secret: UNINITIALIZED or Ready(shares)
        keys: {peer number: pairwise blinding key} (private)
    """

    def __init__(self, number: int, params: SchemeParameters, committee_size: int,
                 rng=None, noise=None, debug: bool = False):
        if committee_size < 1:
            raise ValueError(f"Committee size must be >= 1, got {committee_size}")
        if number < 1 or number > committee_size:
            raise ValueError(f"Participant number must be in [1, {committee_size}], got {number}")

        self.number = number
        self.params = params
        self.committee_size = committee_size
        self.debug = debug

        self.rng = rng if rng is not None else SystemRandomSource()
        if noise is None:
            noise = GaussianNoise(params.noise_sigma / math.sqrt(committee_size))
        self.scheme = LweScheme(params, rng=self.rng, noise=noise)

        self.secret = UNINITIALIZED
        self.keys: Dict[int, int] = {}
        self._pending: List[int] = []

    def _log(self, msg: str) -> None:
        if self.debug:
            print(f'[DKG Node {self.number}] {msg}', file=sys.stderr)

    @property
    def is_ready(self) -> bool:
        return isinstance(self.secret, Ready)

    @property
    def secret_share(self) -> Tuple[int, ...]:
        if not isinstance(self.secret, Ready):
            raise UninitializedSecretMaterial(
                f"Participant {self.number} has no secret-key share (key generation not complete)"
            )
        return self.secret.shares

    @property
    def committee(self) -> List[int]:
        return sorted([self.number] + list(self.keys))

    # ------------------------------------------------------------------
    # Key generation
    # ------------------------------------------------------------------

    def contribute_key_share(self, n: Optional[int] = None) -> Share:
        """Draw one value of bit length n as this participant's share of one coordinate."""
        bits = self.params.n if n is None else n
        value = self.rng.randbits(bits)
        self._pending.append(value)
        return Share(self.number, value)

    def receive_secret_share(self, coordinates: Sequence[int]) -> None:
        """
        Install the coordinate-wise shares s_i (one per coordinate of s).

        Raises:
            ProtocolShapeViolation: len(coordinates) != n
        """
        if len(coordinates) != self.params.n:
            raise ProtocolShapeViolation(
                f"Participant {self.number} expected {self.params.n} coordinate shares, got {len(coordinates)}"
            )
        q = self.params.q
        self.secret = Ready(tuple(floor_mod(c, q) for c in coordinates))
        self._pending = []
        self._log(f'installed {len(coordinates)} coordinate shares')

    def contribute_blinding_key(self, peer: int) -> int:
        """Draw the pairwise blinding key shared with `peer` and keep it."""
        if peer == self.number or peer in self.keys:
            raise ProtocolShapeViolation(f"Participant {self.number} already keyed with {peer}")
        key = self.rng.randbits(self.params.n)
        self.keys[peer] = key
        return key

    def receive_blinding_key(self, peer: int, key: int) -> None:
        if peer == self.number or peer in self.keys:
            raise ProtocolShapeViolation(f"Participant {self.number} already keyed with {peer}")
        self.keys[peer] = key

    def gen_error(self) -> List[int]:
        """m local error samples (spread σ/√N)."""
        return self.scheme.gen_e()

    def contribute_error_share(self, error: int, numbers: Sequence[int]) -> List[Share]:
        """
        Re-share one local error sample to the whole committee.

        Anchor points (0, e), (1, r_1), ..., (d, r_d) with d = ⌊N/4⌋ are
        interpolated and the polynomial is evaluated at every participant
        number. The anchors are consecutive integers, so every evaluation
        is an exact integer.

        Args:
            error: Local error sample (any integer, reduced or not)
            numbers: Committee numbers to evaluate at

        Returns:
            One Share per committee number
        """
        if len(numbers) != self.committee_size:
            raise ProtocolShapeViolation(
                f"Expected {self.committee_size} recipients, got {len(numbers)}"
            )
        q = self.params.q
        degree = self.committee_size // 4

        anchors = [Share(0, error)]
        anchors += [Share(k, self.rng.randbits(self.params.n)) for k in range(1, degree + 1)]
        l = interpolate(anchors)

        return [Share(p, floor_mod(l(p), q)) for p in numbers]

    def combine_error(self, row_shares: Sequence[int]) -> int:
        """ε_i for one row: sum of the N re-shares received for that row (mod q)."""
        if len(row_shares) != self.committee_size:
            raise ProtocolShapeViolation(
                f"Expected {self.committee_size} error shares, got {len(row_shares)}"
            )
        return floor_mod(sum(row_shares), self.params.q)

    def compute_partial_public_value(self, A: Sequence[Sequence[int]],
                                     combined_error: Sequence[int]) -> List[int]:
        """
        b_i = A·s_i + ε_i (mod q), one entry per row of A.

        Raises:
            UninitializedSecretMaterial: no secret-key share yet
            ProtocolShapeViolation: len(combined_error) != len(A)
        """
        s_i = self.secret_share
        b_i = self.scheme.gen_b(A, s_i, combined_error)
        self._log(f'partial public value computed ({len(b_i)} rows)')
        return b_i

    # ------------------------------------------------------------------
    # Decryption
    # ------------------------------------------------------------------

    def gen_x(self, c: Ciphertext) -> int:
        """Mask x_i for ciphertext c; Σ λ_i·x_i = 0 over the committee."""
        if len(self.keys) != self.committee_size - 1:
            raise ProtocolShapeViolation(
                f"Expecting {self.committee_size - 1} blinding keys, but got {len(self.keys)}"
            )
        n, q = self.params.n, self.params.q
        lambdas = lagrange_coefficients_at_zero(self.committee)
        c_bytes = c.to_bytes()

        x = 0
        for peer, key in self.keys.items():
            sign = 1 if self.number < peer else -1
            x += sign * lambdas[peer] * derive_mask(c_bytes, key, n, q)
        return floor_mod(x, q)

    def partial_decrypt(self, c: Ciphertext) -> Share:
        """
        Blinded partial decryption share (i, x_i + b - <a, s_i>).

        Raises:
            UninitializedSecretMaterial: called before key generation
        """
        s_i = self.secret_share
        if len(c.a) != self.params.n:
            raise ProtocolShapeViolation(f"Ciphertext has {len(c.a)} coordinates, expected {self.params.n}")

        q = self.params.q
        residual = floor_mod(c.b - dot(c.a, s_i, q), q)
        x = self.gen_x(c)
        return Share(self.number, floor_mod(x + residual, q))

    def combine(self, shares: Sequence[Share]) -> int:
        """
        Recover the bit from the N blinded partial decryptions.

        Raises:
            UninitializedSecretMaterial: called before key generation
            ShareCountMismatch: not exactly one share per committee member
        """
        if not self.is_ready:
            raise UninitializedSecretMaterial(
                f"Participant {self.number} cannot combine before key generation"
            )
        l = interpolate(shares, expected_count=self.committee_size)
        if list(l.indices) != self.committee:
            raise ShareCountMismatch(
                f"Share indices {list(l.indices)} do not match committee {self.committee}"
            )

        q = self.params.q
        m = floor_mod(l(0), q)
        return 1 if in_signal_band(m, q) else 0
