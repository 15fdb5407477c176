"""
Random Source

A single injectable source of randomness for the engine. Seed it to get
repeatable matches; leave it unseeded for normal play.
"""

from __future__ import annotations

from typing import Protocol, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class RandomSource(Protocol):
    """What the engine needs from a random number generator."""

    def random(self) -> float: ...

    def uniform(self, low: float, high: float) -> float: ...

    def randint(self, low: int, high: int) -> int: ...

    def choice(self, items: Sequence[T]) -> T: ...

    def weighted_choice(self, items: Sequence[T], weights: Sequence[float]) -> T: ...

    def chance(self, probability: float) -> bool: ...


class NumpyRandomSource:
    """RandomSource backed by ``numpy.random.default_rng``."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return float(self._rng.random())

    def uniform(self, low: float, high: float) -> float:
        return float(self._rng.uniform(low, high))

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both ends inclusive."""
        return int(self._rng.integers(low, high + 1))

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[int(self._rng.integers(len(items)))]

    def weighted_choice(self, items: Sequence[T], weights: Sequence[float]) -> T:
        """Pick one item with probability proportional to its weight.

        Falls back to a uniform pick when every weight is zero.
        """
        if len(items) != len(weights):
            raise ValueError("items and weights must have the same length")
        total = float(sum(weights))
        if total <= 0:
            return self.choice(items)
        roll = self.random() * total
        cumulative = 0.0
        for item, weight in zip(items, weights):
            cumulative += weight
            if roll < cumulative:
                return item
        return items[-1]

    def chance(self, probability: float) -> bool:
        """True with the given probability (0..1)."""
        return self.random() < probability
