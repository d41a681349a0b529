"""Deterministic PRNG for reproducible key and nonce generation.

Pass a seed for reproducible runs in tests. Without one every draw
comes from os.urandom. There is no process-wide instance: each owner
holds its own generator.
"""

import os
import random as _random


class DeterministicRNG:
    """Seeded PRNG wrapper. When seed is None, uses os.urandom."""

    def __init__(self, seed: int | None = None):
        if seed is not None:
            self._rng = _random.Random(seed)
        else:
            self._rng = None  # Use os-level randomness

    def randbelow(self, n: int) -> int:
        if self._rng is not None:
            return self._rng.randrange(n)
        return int.from_bytes(os.urandom(16), 'big') % n

    def randbytes(self, n: int) -> bytes:
        if self._rng is not None:
            return self._rng.getrandbits(8 * n).to_bytes(n, 'big')
        return os.urandom(n)
