"""Seeded linear congruential random source.

Every stage of generation draws from a single ``SeededRandom`` owned by the
call, so a (seed, options) pair always reproduces the same level.

The recurrence is ``state = (state * 1664525 + 1013904223) mod 2**31`` and
must stay bit-exact: level files shared between tools are keyed by seed.
"""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

_MULTIPLIER = 1664525
_INCREMENT = 1013904223
_MODULUS = 2**31


class SeededRandom:
    """Deterministic float source in [0, 1)."""

    def __init__(self, seed: int):
        self.seed = seed
        self.state = seed
        self.calls = 0

    def next(self) -> float:
        """Advance the state and return the next float in [0, 1)."""
        self.state = (self.state * _MULTIPLIER + _INCREMENT) % _MODULUS
        self.calls += 1
        return self.state / _MODULUS

    def randint(self, n: int) -> int:
        """Return an integer in [0, n) using one draw."""
        return int(self.next() * n)

    def chance(self, probability: float) -> bool:
        """Return True with the given probability using one draw."""
        return self.next() < probability

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(len(seq))]

    def shuffle(self, seq: Sequence[T]) -> list[T]:
        """Return a Fisher-Yates shuffled copy of ``seq``."""
        shuffled = list(seq)
        for i in range(len(shuffled) - 1, 0, -1):
            j = int(self.next() * (i + 1))
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.seed}, calls={self.calls})"
