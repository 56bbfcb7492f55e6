"""
The come/odds betting strategy and its bet sizing.

The strategy keeps a pass line bet working on every come-out, puts a come
bet down on each point roll and backs every line and come bet with the
most odds the table allows.
"""
import logging
import math
from typing import Callable, Optional

from .bets import BetLedger, FlatBet
from .errors import ConfigError
from .game import CrapsGame, TableRules

logger = logging.getLogger(__name__)

BetSizer = Callable[[float, float], float]

DEFAULT_GROWTH_UNITS = 20


def flat_unit(bankroll: float, min_bet: float) -> float:
    """Always bet the table minimum."""
    return min_bet


class MilestoneGrowth:
    """
    One extra table-minimum unit for every `step` of bankroll.

    Bets never drop below one unit and are always whole units.
    """

    def __init__(self, step: float):
        if step <= 0:
            raise ConfigError("Growth step must be positive")
        self.step = step

    def __call__(self, bankroll: float, min_bet: float) -> float:
        units = max(1, math.floor(bankroll / self.step))
        return min_bet * units

    def __repr__(self) -> str:
        return f"MilestoneGrowth(step={self.step})"


def round_down(amount: float, increment: float) -> float:
    """Round down to a whole number of increments."""
    return increment * math.floor(amount / increment)


class ComeOddsStrategy:
    """
    Pass line and come bets with maximum odds.

    Places a pass line bet on the come-out, a come bet whenever the point
    is on and no come bet is still waiting for its number, and full odds
    behind every bet with a point.
    """

    def __init__(self, rules: TableRules, max_come_bets: int = 6,
                 grow_bets: bool = False, grow_odds: bool = False,
                 odds_off_without_point: bool = False,
                 sizer: Optional[BetSizer] = None):
        """
        Args:
            rules: Table rules (minimum bet and odds ladder)
            max_come_bets: Most come bets allowed on the table at once
            grow_bets: Size line and come bets with `sizer` instead of the minimum
            grow_odds: Size odds from `sizer` instead of the parent bet
            odds_off_without_point: Only back come bets once they have a point,
                and keep their odds off on come-out rolls
            sizer: Growth function (bankroll, min_bet) -> bet size
        """
        if max_come_bets < 0:
            raise ConfigError("max_come_bets cannot be negative")
        self.rules = rules
        self.max_come_bets = max_come_bets
        self.grow_bets = grow_bets
        self.grow_odds = grow_odds
        self.odds_off_without_point = odds_off_without_point
        self.sizer = sizer or MilestoneGrowth(DEFAULT_GROWTH_UNITS * rules.minimum_bet)

    @property
    def name(self) -> str:
        parts = [f"Pass/Come + {self.rules.odds_multiple}x Odds"]
        if self.grow_bets:
            parts.append("grow bets")
        if self.grow_odds:
            parts.append("grow odds")
        return ", ".join(parts)

    def grown_unit(self, bankroll: float) -> float:
        """Growth curve output, rounded down to whole table minimums."""
        min_bet = self.rules.minimum_bet
        return max(min_bet, round_down(self.sizer(bankroll, min_bet), min_bet))

    def base_bet(self, bankroll: float) -> float:
        """Size of the next line or come bet."""
        if self.grow_bets:
            return self.grown_unit(bankroll)
        return self.rules.minimum_bet

    def _affordable(self, amount: float, increment: float, bankroll: float) -> float:
        if amount <= bankroll:
            return amount
        return round_down(bankroll, increment)

    def place_bets(self, ledger: BetLedger, game: CrapsGame) -> None:
        """Place and back bets before the next roll."""
        bankroll = ledger.bankroll
        min_bet = self.rules.minimum_bet

        if ledger.line_bet is None and game.is_come_out:
            amount = self._affordable(self.base_bet(bankroll), min_bet, ledger.bankroll)
            if amount >= min_bet:
                ledger.place_line_bet(amount)

        if (game.is_point_phase
                and len(ledger.come_bets) < self.max_come_bets
                and ledger.traveling_come_bet is None):
            amount = self._affordable(self.base_bet(bankroll), min_bet, ledger.bankroll)
            if amount >= min_bet:
                come = ledger.place_come_bet(amount)
                if not self.odds_off_without_point:
                    self._back_with_odds(ledger, come, bankroll)

        for bet in ledger.flat_bets:
            if bet.odds is None and bet.point is not None:
                self._back_with_odds(ledger, bet, bankroll)

    def _back_with_odds(self, ledger: BetLedger, bet: FlatBet, bankroll: float) -> None:
        unit = self.grown_unit(bankroll) if self.grow_odds else bet.amount
        full = ledger.odds_limit(bet, unit)
        amount = self._affordable(full, unit, ledger.bankroll)
        if amount <= 0:
            logger.debug("no bankroll left for odds behind %r", bet)
            return
        ledger.place_odds(
            bet, amount, unit=unit,
            off_on_come_out=self.odds_off_without_point and bet is not ledger.line_bet,
        )
