#!/usr/bin/env python3
"""
randomness.py - Randomness sources for key, error and encryption material

Two sources share one interface (randbits / shuffle):
- SystemRandomSource: OS CSPRNG via `secrets` - the default everywhere
- DeterministicRandomSource: seeded `random.Random` that counts its draws.
  TESTING ONLY - reproducible but not cryptographically secure.
"""

import random
import secrets
from typing import List, MutableSequence, Optional


class SystemRandomSource:
    """Cryptographically secure source backed by the OS."""

    is_deterministic = False

    def __init__(self):
        self._rng = secrets.SystemRandom()
        self.draw_count = 0

    def randbits(self, bits: int) -> int:
        """Uniform integer in [0, 2^bits)."""
        if bits < 0:
            raise ValueError(f"Bit length must be non-negative, got {bits}")
        self.draw_count += 1
        if bits == 0:
            return 0
        return secrets.randbits(bits)

    def shuffle(self, items: MutableSequence) -> None:
        self.draw_count += 1
        self._rng.shuffle(items)


class DeterministicRandomSource:
    """
    Seeded, reproducible source for tests and benchmarks.

    draw_count is incremented on every call so tests can check that an
    operation consumed no randomness.
    """

    is_deterministic = True

    def __init__(self, seed: Optional[int] = 0):
        self.seed = seed
        self._rng = random.Random(seed)
        self.draw_count = 0

    def randbits(self, bits: int) -> int:
        if bits < 0:
            raise ValueError(f"Bit length must be non-negative, got {bits}")
        self.draw_count += 1
        if bits == 0:
            return 0
        return self._rng.getrandbits(bits)

    def shuffle(self, items: MutableSequence) -> None:
        self.draw_count += 1
        self._rng.shuffle(items)


def rand_vector(rng, length: int, bits: int) -> List[int]:
    """Vector of `length` independent values of bit length `bits`."""
    return [rng.randbits(bits) for _ in range(length)]
