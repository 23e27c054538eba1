"""
Random sources for the dice engine.

Every roll draws its dice from a RandomSource passed in by the caller, so
evaluation is deterministic whenever the source is.
"""

import random
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional


class RandomSource(ABC):
    """Uniform integer generator over [1, sides]."""

    @abstractmethod
    def draw(self, sides: int) -> int:
        """Return one uniformly distributed value in [1, sides]."""
        pass


class SystemRandomSource(RandomSource):
    """
    RandomSource backed by random.Random.

    Args:
        seed: Random seed for deterministic rolls (testing/replay)
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = random.Random(seed)

    def draw(self, sides: int) -> int:
        return self.rng.randint(1, sides)

    def set_seed(self, seed: int) -> None:
        """Change random seed (for testing/replay)."""
        self.seed = seed
        self.rng = random.Random(seed)


class ScriptedRandomSource(RandomSource):
    """
    RandomSource that hands out a fixed sequence of values.

    Used by tests and to replay a recorded roll from RollResult.replay_values().

    Example:
        >>> source = ScriptedRandomSource([8, 3])
        >>> source.draw(8), source.draw(8)
        (8, 3)
    """

    def __init__(self, values: Iterable[int]):
        self.values: List[int] = list(values)
        self.position = 0

    def draw(self, sides: int) -> int:
        if self.position >= len(self.values):
            raise ValueError(
                f"Scripted random source exhausted after {len(self.values)} draws"
            )
        value = self.values[self.position]
        if not 1 <= value <= sides:
            raise ValueError(f"Scripted value {value} is not a face of a d{sides}")
        self.position += 1
        return value

    @property
    def remaining(self) -> int:
        """Number of scripted values not yet drawn."""
        return len(self.values) - self.position
