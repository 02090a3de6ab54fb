#!/usr/bin/env python3
"""
coordinator.py - Orchestrates distributed key generation and decryption

The Coordinator is the public channel: every message between participants
passes through it. It keeps the roster, the committee public key and the
parameters; it never keeps the secret key or any blinding key.

DKG PROTOCOL (5 phases):
========================
1. Secret key shares: for each coordinate j of s, every participant i
   contributes s_i[j]; the share set defines s[j] = f_j(0) (never evaluated)
2. Blinding keys: for every pair i < j, i draws k_ij and it is relayed to j
3. Public matrix: A is drawn once, in the clear
4. Error re-sharing: every participant re-shares its m error samples,
   each participant sums what it receives per row
5. Public key: b_i = A·s_i + ε_i per participant, b[row] = interpolation
   at 0 of {(i, b_i[row])}

DECRYPTION:
===========
broadcast c → collect (i, x_i + b - <a, s_i>) from all N → every
participant interpolates at 0 and applies the signal-band test.
"""

import math
import sys
import time
from typing import Dict, List, Optional, Tuple

from core.modular import floor_mod
from core.randomness import SystemRandomSource
from .lwe_scheme import Ciphertext, LweScheme, PublicKey, SchemeParameters, SecretKey
from .noise_primitives import GaussianNoise
from .participant import Participant
from .shamir_utils import Share, interpolate, reconstruct_secret


# ============================================================================
# PARAMETERS
# ============================================================================

DEFAULT_COMMITTEE_SIZE = 10


class Coordinator:
    """
    Committee of N participants sharing one LWE key.

    Attributes:
        params: SchemeParameters (n, m, q)
        committee_size: N (fixed at construction)
        participants: Participant roster, numbers 1..N
        public_key: committee PublicKey (A, b)
    """

    def __init__(self, committee_size: int = DEFAULT_COMMITTEE_SIZE, n: int = 25,
                 rng=None, noise=None, debug: bool = False):
        if committee_size < 1:
            raise ValueError(f"Committee size must be >= 1, got {committee_size}")

        self.params = SchemeParameters(n)
        self.committee_size = committee_size
        self.debug = debug
        self.rng = rng if rng is not None else SystemRandomSource()

        if noise is None:
            noise = GaussianNoise(self.params.noise_sigma)
        self.scheme = LweScheme(self.params, rng=self.rng, noise=noise)

        # Each participant samples with spread σ/√N: the committee sum has spread σ.
        share_noise = noise.scaled(1 / math.sqrt(committee_size))
        self.participants = [
            Participant(number, self.params, committee_size, rng=self.rng,
                        noise=share_noise.scaled(1.0), debug=debug)
            for number in range(1, committee_size + 1)
        ]

        self.keygen_time = 0.0
        t0 = time.perf_counter()
        self.public_key = self.keygen()
        self.keygen_time = time.perf_counter() - t0

    def _log(self, msg: str) -> None:
        if self.debug:
            print(f'[DKG] {msg}', file=sys.stderr)

    @property
    def numbers(self) -> List[int]:
        return [p.number for p in self.participants]

    # ------------------------------------------------------------------
    # Distributed key generation
    # ------------------------------------------------------------------

    def keygen(self) -> PublicKey:
        N = self.committee_size
        n, m, q = self.params.n, self.params.m, self.params.q
        numbers = self.numbers

        self._log(f'{N}-of-{N} committee, n={n}, m={m}, q=2^{n}')

        # PHASE 1: secret key shares
        sks: Dict[int, List[int]] = {number: [] for number in numbers}
        for _ in range(n):
            shares = [party.contribute_key_share(n) for party in self.participants]
            interpolate(shares, expected_count=N)
            for share in shares:
                sks[share.index].append(share.value)

        for party in self.participants:
            party.receive_secret_share(sks[party.number])
        del sks
        self._log(f'PHASE 1: {n} coordinates shared')

        # PHASE 2: pairwise blinding keys
        for i, party in enumerate(self.participants):
            for peer in self.participants[i + 1:]:
                key = party.contribute_blinding_key(peer.number)
                peer.receive_blinding_key(party.number, key)
        self._log(f'PHASE 2: {N * (N - 1) // 2} blinding keys relayed')

        # PHASE 3: public matrix
        A = self.scheme.gen_a()

        # PHASE 4: error re-sharing
        es: Dict[int, List[List[int]]] = {number: [[] for _ in range(m)] for number in numbers}
        for party in self.participants:
            e = party.gen_error()
            for row, ei in enumerate(e):
                for share in party.contribute_error_share(ei, numbers):
                    es[share.index][row].append(share.value)

        combined = {
            party.number: [party.combine_error(es[party.number][row]) for row in range(m)]
            for party in self.participants
        }
        del es
        self._log(f'PHASE 4: {m} error rows re-shared')

        # PHASE 5: partial public values → b
        bss: List[List[Share]] = [[] for _ in range(m)]
        for party in self.participants:
            b_i = party.compute_partial_public_value(A, combined[party.number])
            for row, bi in enumerate(b_i):
                bss[row].append(Share(party.number, bi))

        b = [floor_mod(interpolate(bs, expected_count=N)(0), q) for bs in bss]
        self._log(f'PHASE 5: public key assembled ({m} rows)')

        return PublicKey(tuple(tuple(row) for row in A), tuple(b))

    # ------------------------------------------------------------------
    # Encryption / decryption
    # ------------------------------------------------------------------

    def encrypt(self, bit: int) -> Ciphertext:
        return self.scheme.encrypt(self.public_key, bit)

    def decrypt(self, c: Ciphertext) -> List[Tuple[int, int]]:
        """
        Threshold decryption.

        Returns:
            [(participant number, recovered bit), ...] - one entry per
            participant; all entries agree unless the protocol is broken
        """
        shares = [party.partial_decrypt(c) for party in self.participants]
        if self.debug:
            print(f'[DECRYPT] collected {len(shares)} partial decryptions', file=sys.stderr)
        return [(party.number, party.combine(shares)) for party in self.participants]

    def decrypt_bit(self, c: Ciphertext) -> int:
        """Single recovered bit; RuntimeError if participants disagree."""
        results = self.decrypt(c)
        bits = {bit for _, bit in results}
        if len(bits) != 1:
            raise RuntimeError(f"Participants disagree on the plaintext: {results}")
        return bits.pop()

    def debug_secret_key(self) -> SecretKey:
        """
        Reconstruct s from all participants' shares. TESTING ONLY.

        This is exactly the operation the protocol exists to avoid.
        """
        print('[DKG] WARNING: assembling the full secret key (debug path)', file=sys.stderr)
        N, q = self.committee_size, self.params.q
        s = []
        for j in range(self.params.n):
            shares = [Share(party.number, party.secret_share[j]) for party in self.participants]
            s.append(reconstruct_secret(shares, q, expected_count=N))
        return SecretKey(tuple(s))


def run_threshold_protocol(committee_size: int, n: int, bit: int,
                           rng=None, noise=None) -> Tuple[Coordinator, Ciphertext, List[Tuple[int, int]]]:
    """Keygen → encrypt(bit) → decrypt in one call (benchmarks, smoke tests)."""
    coordinator = Coordinator(committee_size, n, rng=rng, noise=noise)
    c = coordinator.encrypt(bit)
    return coordinator, c, coordinator.decrypt(c)
