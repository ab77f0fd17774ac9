"""Randomness sources for key generation and timestamp jitter.

Every consumer of randomness in giftwrap takes a :class:`RandomSource`
argument instead of reaching for a module-level generator. Production code
uses :class:`SystemRandomSource` (backed by :mod:`secrets`); tests inject a
:class:`SeededRandomSource` to make envelopes reproducible.

Example:
    >>> rng = SeededRandomSource(b"test-seed")
    >>> len(rng.token_bytes(32))
    32
"""

from __future__ import annotations

import hashlib
import secrets
import threading
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Capability for drawing random bytes and bounded integers."""

    def token_bytes(self, n: int) -> bytes: ...
    def randbelow(self, upper: int) -> int: ...


class SystemRandomSource:
    """Cryptographically secure randomness from the operating system."""

    def token_bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)

    def randbelow(self, upper: int) -> int:
        return secrets.randbelow(upper)

    def __repr__(self) -> str:
        return "SystemRandomSource()"


class SeededRandomSource:
    """Deterministic randomness for tests.

    Output is a SHA-256 counter stream over the seed, so two sources built
    from the same seed yield the same sequence. NOT suitable for real keys.
    """

    def __init__(self, seed: bytes | str) -> None:
        if isinstance(seed, str):
            seed = seed.encode("utf-8")
        self._seed = seed
        self._counter = 0
        self._lock = threading.Lock()

    def _block(self) -> bytes:
        with self._lock:
            counter = self._counter
            self._counter += 1
        return hashlib.sha256(self._seed + counter.to_bytes(8, "big")).digest()

    def token_bytes(self, n: int) -> bytes:
        out = b""
        while len(out) < n:
            out += self._block()
        return out[:n]

    def randbelow(self, upper: int) -> int:
        if upper <= 0:
            raise ValueError("upper bound must be positive")
        # Rejection sampling keeps the distribution uniform
        nbytes = (upper.bit_length() + 7) // 8 + 1
        limit = (256**nbytes // upper) * upper
        while True:
            value = int.from_bytes(self.token_bytes(nbytes), "big")
            if value < limit:
                return value % upper

    def __repr__(self) -> str:
        return "SeededRandomSource(<seed>)"


# Shared default; stateless, safe to use from any thread
default_random = SystemRandomSource()


def resolve(rng: RandomSource | None) -> RandomSource:
    """Return ``rng`` or the process default."""
    return rng if rng is not None else default_random
