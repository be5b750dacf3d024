"""
RNG - Seeded Level Randomness
=============================

The single uniform random source consumed by level generation.
State can be captured and restored so generation is a pure function
of (inputs, rng_state).
"""

from __future__ import annotations

import random
from typing import Any, List, Optional, Sequence, TypeVar

T = TypeVar("T")

# Opaque snapshot produced by random.Random.getstate()
RngState = Any


class LevelRng:
    """
    Deterministic random source for the level generator.

    Exposes only what generation needs: floats in [0, 1), inclusive
    integer ranges, uniform choice and in-place shuffles.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize the random source.

        Args:
            seed: Random seed for reproducibility. Random if None.
        """
        self._seed = seed
        self._rng = random.Random(seed)

    @classmethod
    def from_state(cls, state: RngState) -> "LevelRng":
        """Build a source positioned at a captured state."""
        rng = cls()
        rng.set_state(state)
        return rng

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both inclusive."""
        return self._rng.randint(low, high)

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self._rng.random()

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self._rng.randrange(len(items))]

    def shuffle(self, items: List[T]) -> None:
        """Shuffle a list in place."""
        self._rng.shuffle(items)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the source with optional new seed.

        Args:
            seed: New random seed. Keeps current if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)

    def get_state(self) -> RngState:
        """Get state for checkpointing or pure generation calls."""
        return self._rng.getstate()

    def set_state(self, state: RngState) -> None:
        self._rng.setstate(state)
