"""
Random draws for a match.

All randomness in the engine goes through one Rng held by the GameState,
so a match replays identically from the same seed and call sequence.
"""

from __future__ import annotations
import random
from typing import Iterable, TypeVar

from .errors import EngineFault

T = TypeVar("T")


class Rng:
    """Seeded draw-one-of-N source."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._random = random.Random(seed)

    def draw(self, n: int) -> int:
        """Uniform integer in [0, n), advancing the generator."""
        if n <= 0:
            raise EngineFault(f"Cannot draw from an empty range ({n})")
        return self._random.randrange(n)

    def shuffle(self, items: Iterable[T]) -> list[T]:
        """
        Shuffle by repeatedly drawing an index into the remaining items.

        Removal is positional, so equal items are interchangeable and
        the result is always a permutation of the input.
        """
        remaining = list(items)
        shuffled = []
        while remaining:
            shuffled.append(remaining.pop(self.draw(len(remaining))))
        return shuffled
