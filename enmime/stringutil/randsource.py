"""A thread-safe, seedable source of pseudo-random numbers."""

from __future__ import annotations

import random
import threading


class LockedSource:
    """A seeded random source whose operations are serialised by a lock."""

    def __init__(self, seed: int) -> None:
        self._lock = threading.Lock()
        self._rng = random.Random(seed)

    def int63(self) -> int:
        """Return a non-negative integer below 2**63."""
        with self._lock:
            return self._rng.getrandbits(63)

    def uint64(self) -> int:
        """Return a non-negative integer below 2**64."""
        with self._lock:
            return self._rng.getrandbits(64)

    def seed(self, seed: int) -> None:
        """Reset the source to the state given by ``seed``."""
        with self._lock:
            self._rng.seed(seed)

    def read(self, size: int) -> bytes:
        """Return ``size`` random bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        with self._lock:
            return self._rng.randbytes(size)


def new_locked_source(seed: int) -> LockedSource:
    """Create a locked random source seeded with ``seed``."""
    return LockedSource(seed)