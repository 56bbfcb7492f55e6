"""
Core craps game logic - dice rolls, the point system and table rules.
"""
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Callable

from .dice import DiceProvider
from .errors import ConfigError

logger = logging.getLogger(__name__)

POINT_NUMBERS = (4, 5, 6, 8, 9, 10)
NATURALS = (7, 11)
CRAPS = (2, 3, 12)


class GamePhase(Enum):
    """Represents the current phase of the craps game."""
    COME_OUT = "come_out"  # No point, next roll may establish one
    POINT = "point"        # Point is on, rolling for point or 7


@dataclass(frozen=True)
class DiceRoll:
    """Represents a single roll of two dice."""
    die1: int
    die2: int

    def __post_init__(self):
        for die in (self.die1, self.die2):
            if not 1 <= die <= 6:
                raise ValueError(f"Invalid die value: {die}")

    @property
    def total(self) -> int:
        return self.die1 + self.die2

    def __str__(self) -> str:
        return f"({self.die1}, {self.die2}) = {self.total}"


@dataclass
class TableRules:
    """
    Table limits for the game.

    The odds ladder follows the table's maximum odds multiple: 6 and 8
    take the full multiple, 5 and 9 one less, 4 and 10 two less, never
    below 1x. A multiple of 3 gives 1-2-3x odds, 5 gives 3-4-5x.
    """
    minimum_bet: float = 5
    odds_multiple: int = 3

    def __post_init__(self):
        if self.minimum_bet <= 0:
            raise ConfigError("Minimum bet must be positive")
        if self.odds_multiple < 1:
            raise ConfigError("Odds multiple must be at least 1")

    def odds_multiple_for(self, point: int) -> int:
        """Maximum odds multiple allowed behind a bet on the given point."""
        if point in (6, 8):
            return self.odds_multiple
        if point in (5, 9):
            return max(1, self.odds_multiple - 1)
        if point in (4, 10):
            return max(1, self.odds_multiple - 2)
        raise ValueError(f"Not a point number: {point}")


class CrapsGame:
    """
    Tracks the table point across rolls.

    Roll callbacks fire before the phase changes, so bets are settled
    against the phase the roll was thrown in.
    """

    def __init__(self, dice_provider: DiceProvider):
        self.dice_provider = dice_provider
        self.phase = GamePhase.COME_OUT
        self.point: Optional[int] = None

        self._on_roll_callbacks: list[Callable[[DiceRoll], None]] = []
        self._on_point_established_callbacks: list[Callable[[int], None]] = []
        self._on_point_won_callbacks: list[Callable[[int], None]] = []
        self._on_seven_out_callbacks: list[Callable[[], None]] = []

    def roll_dice(self) -> DiceRoll:
        """Roll the dice and process the result."""
        roll = DiceRoll(*self.dice_provider.roll())
        logger.debug("roll %s phase=%s point=%s", roll, self.phase.value, self.point)

        for callback in self._on_roll_callbacks:
            callback(roll)

        self._process_roll(roll)
        return roll

    def _process_roll(self, roll: DiceRoll) -> None:
        total = roll.total

        if self.phase == GamePhase.COME_OUT:
            if total in POINT_NUMBERS:
                self.point = total
                self.phase = GamePhase.POINT
                for callback in self._on_point_established_callbacks:
                    callback(total)
            # Naturals and craps leave the table on the come-out
            return

        if total == self.point:
            made = self.point
            self._reset()
            for callback in self._on_point_won_callbacks:
                callback(made)
        elif total == 7:
            self._reset()
            for callback in self._on_seven_out_callbacks:
                callback()

    def _reset(self) -> None:
        self.phase = GamePhase.COME_OUT
        self.point = None

    def on_roll(self, callback: Callable[[DiceRoll], None]) -> None:
        """Register a callback for when dice are rolled."""
        self._on_roll_callbacks.append(callback)

    def on_point_established(self, callback: Callable[[int], None]) -> None:
        """Register a callback for when a point is established."""
        self._on_point_established_callbacks.append(callback)

    def on_point_won(self, callback: Callable[[int], None]) -> None:
        """Register a callback for when the point is made."""
        self._on_point_won_callbacks.append(callback)

    def on_seven_out(self, callback: Callable[[], None]) -> None:
        """Register a callback for when the shooter sevens out."""
        self._on_seven_out_callbacks.append(callback)

    @property
    def is_come_out(self) -> bool:
        return self.phase == GamePhase.COME_OUT

    @property
    def is_point_phase(self) -> bool:
        return self.phase == GamePhase.POINT
