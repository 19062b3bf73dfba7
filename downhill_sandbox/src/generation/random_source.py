"""Seeded random stream shared by every course generation pass."""
from __future__ import annotations

import random
from typing import Sequence, TypeVar, overload

T = TypeVar("T")


# //1.- Wrap a seeded generator so consumers only see the narrow draw API.
class SeededRandom:
    """Deterministic float/int stream; not safe for concurrent callers."""

    def __init__(self, seed: int) -> None:
        self._seed = int(seed)
        self._rng = random.Random(self._seed)

    @property
    def seed(self) -> int:
        return self._seed

    def next_float(self) -> float:
        return self._rng.random()

    @overload
    def next_int(self, max_exclusive: int) -> int: ...

    @overload
    def next_int(self, min_inclusive: int, max_exclusive: int) -> int: ...

    # //2.- Accept either (max) or (min, max) with a half-open upper bound.
    def next_int(self, first: int, second: int | None = None) -> int:
        if second is None:
            low, high = 0, int(first)
        else:
            low, high = int(first), int(second)
        if high <= low:
            raise ValueError(f"empty integer range [{low}, {high})")
        return self._rng.randrange(low, high)

    def range(self, minimum: float, maximum: float) -> float:
        return minimum + self.next_float() * (maximum - minimum)

    def choose(self, options: Sequence[T]) -> T:
        if not options:
            raise IndexError("cannot choose from an empty sequence")
        return options[self.next_int(len(options))]
