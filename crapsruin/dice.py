"""
Dice providers.

Each trial gets its own random stream so trials stay independent and a
scenario is reproducible from a single seed.
"""
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class DiceProvider(ABC):
    """Abstract interface for dice generation."""

    @abstractmethod
    def roll(self) -> tuple[int, int]:
        """
        Roll two dice.

        Returns:
            tuple[int, int]: (die1, die2) where each is 1-6
        """
        pass


class RandomDiceProvider(DiceProvider):
    """Dice drawn from a numpy random generator."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def roll(self) -> tuple[int, int]:
        die1, die2 = self.rng.integers(1, 7, size=2)
        return int(die1), int(die2)


class SequenceDiceProvider(DiceProvider):
    """
    Replays dice rolls from a pre-recorded sequence.

    Raises IndexError when sequence is exhausted.
    """

    def __init__(self, sequence: list[tuple[int, int]]):
        self.sequence = list(sequence)
        self.index = 0

    @classmethod
    def from_totals(cls, totals: list[int]) -> "SequenceDiceProvider":
        """Build a sequence from roll totals, splitting each into two dice."""
        rolls = []
        for total in totals:
            if not 2 <= total <= 12:
                raise ValueError(f"Invalid dice total: {total}")
            die1 = min(6, total - 1)
            rolls.append((die1, total - die1))
        return cls(rolls)

    def roll(self) -> tuple[int, int]:
        if self.index >= len(self.sequence):
            raise IndexError(f"Dice sequence exhausted after {self.index} rolls")

        roll = self.sequence[self.index]
        self.index += 1
        return roll

    @property
    def remaining(self) -> int:
        """Get number of rolls remaining in sequence."""
        return len(self.sequence) - self.index


def spawn_dice_providers(seed: Optional[int], count: int) -> list[RandomDiceProvider]:
    """
    Create `count` independent dice streams from one seed.

    The same seed always yields the same streams in the same order.
    """
    children = np.random.SeedSequence(seed).spawn(count)
    return [RandomDiceProvider(np.random.default_rng(child)) for child in children]
