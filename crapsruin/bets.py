"""
Craps bet types, pay tables and the bet ledger.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Optional

from .errors import InvariantViolation
from .game import CRAPS, NATURALS, DiceRoll, GamePhase, TableRules

logger = logging.getLogger(__name__)


class BetStatus(Enum):
    """Status of a bet."""
    ACTIVE = "active"     # Bet is in play
    WON = "won"           # Bet has won
    LOST = "lost"         # Bet has lost
    PUSH = "push"         # Bet is returned


@dataclass
class BetResult:
    """Result of resolving a bet."""
    status: BetStatus
    payout: float  # Winnings on top of the returned stake (0 for loss or push)
    message: str


class Bet(ABC):
    """Abstract base class for all bet types."""

    def __init__(self, amount: float):
        self.amount = amount
        self.status = BetStatus.ACTIVE

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name of the bet."""
        pass

    def __repr__(self) -> str:
        return f"{self.name}[{self.amount}]"


# =============================================================================
# Line Bets (Pass, Come)
# =============================================================================

class FlatBet(Bet):
    """
    A pass-line style wager with its own point.

    Win on 7/11 on its first roll, lose on 2/3/12. Any other total becomes
    the bet's point; it then wins on the point and loses on 7.
    Pays even money (1:1).
    """

    def __init__(self, amount: float):
        super().__init__(amount)
        self.point: Optional[int] = None
        self.odds: Optional["OddsBet"] = None

    def resolve(self, roll: DiceRoll) -> Optional[BetResult]:
        """
        Resolve the bet based on a roll.
        Returns BetResult if bet is resolved, None if bet remains active.
        """
        total = roll.total

        if self.point is None:
            if total in NATURALS:
                return BetResult(BetStatus.WON, self.amount, f"Natural {total}! {self.name} wins!")
            if total in CRAPS:
                return BetResult(BetStatus.LOST, 0, f"Craps {total}! {self.name} loses.")
            self.point = total
            return None

        if total == self.point:
            return BetResult(BetStatus.WON, self.amount, f"Point {total} made! {self.name} wins!")
        if total == 7:
            return BetResult(BetStatus.LOST, 0, f"Seven! {self.name} loses.")
        return None


class PassLineBet(FlatBet):
    """Pass Line bet, placed on the come-out roll."""

    @property
    def name(self) -> str:
        return "Pass Line"


class ComeBet(FlatBet):
    """
    Come bet - like pass line, but placed after the point is on.
    Uses the next roll as its own come-out roll.
    """

    @property
    def name(self) -> str:
        if self.point:
            return f"Come ({self.point})"
        return "Come"


# =============================================================================
# Odds Bets (True odds, no house edge)
# =============================================================================

class OddsBet(Bet):
    """
    Odds bet behind a pass or come bet - pays true odds.

    Settles only together with its parent. Odds that are off, or that were
    committed before the parent had a point, are returned instead.
    """

    # True odds payouts
    ODDS_PAYOUTS = {
        4: Fraction(2, 1),   # 2:1
        5: Fraction(3, 2),   # 3:2
        6: Fraction(6, 5),   # 6:5
        8: Fraction(6, 5),   # 6:5
        9: Fraction(3, 2),   # 3:2
        10: Fraction(2, 1),  # 2:1
    }

    def __init__(self, amount: float, parent: FlatBet, unit: float,
                 off_on_come_out: bool = False):
        super().__init__(amount)
        self.parent = parent
        self.unit = unit
        self.off_on_come_out = off_on_come_out

    @property
    def point(self) -> Optional[int]:
        return self.parent.point

    @property
    def name(self) -> str:
        if self.point:
            return f"Odds ({self.point})"
        return "Odds"

    def is_working(self, phase: GamePhase) -> bool:
        return not (self.off_on_come_out and phase == GamePhase.COME_OUT)

    def settle(self, parent_result: BetResult, phase: GamePhase) -> BetResult:
        """Resolve alongside the parent's result for the same roll."""
        if self.point is None:
            return BetResult(BetStatus.PUSH, 0, "No point behind the odds, returned.")
        if not self.is_working(phase):
            return BetResult(BetStatus.PUSH, 0, f"Odds ({self.point}) off on the come-out, returned.")
        if parent_result.status == BetStatus.WON:
            payout_ratio = self.ODDS_PAYOUTS[self.point]
            payout = float(self.amount * payout_ratio)
            return BetResult(BetStatus.WON, payout, f"Point {self.point}! Odds pays {payout_ratio}!")
        if parent_result.status == BetStatus.LOST:
            return BetResult(BetStatus.LOST, 0, "Seven! Odds bet loses.")
        return BetResult(BetStatus.PUSH, 0, "Odds returned with its bet.")


# =============================================================================
# Bet Ledger
# =============================================================================

class BetLedger:
    """
    Holds the bankroll and every outstanding wager.

    Placement debits the bankroll. Settlement removes resolved bets and
    credits the bankroll in the same step, line bet first, then come bets
    in the order they were placed.
    """

    def __init__(self, rules: TableRules, bankroll: float):
        if bankroll < 0:
            raise InvariantViolation(f"Negative starting bankroll: {bankroll}")
        self.rules = rules
        self.bankroll = bankroll
        self.line_bet: Optional[PassLineBet] = None
        self.come_bets: list[ComeBet] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def can_afford(self, amount: float) -> bool:
        return 0 < amount <= self.bankroll

    @property
    def flat_bets(self) -> list[FlatBet]:
        """Live line and come bets, in settlement order."""
        bets: list[FlatBet] = [self.line_bet] if self.line_bet else []
        return bets + self.come_bets

    @property
    def has_outstanding_bets(self) -> bool:
        return self.line_bet is not None or bool(self.come_bets)

    @property
    def traveling_come_bet(self) -> Optional[ComeBet]:
        """The come bet still waiting for its point, if any."""
        for bet in self.come_bets:
            if bet.point is None:
                return bet
        return None

    def get_total_at_risk(self) -> float:
        """Get total amount of money in active bets."""
        total = 0.0
        for bet in self.flat_bets:
            total += bet.amount
            if bet.odds:
                total += bet.odds.amount
        return total

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def _debit(self, bet: Bet) -> None:
        if not self.can_afford(bet.amount):
            raise InvariantViolation(
                f"{bet.name} of {bet.amount} exceeds bankroll {self.bankroll}"
            )
        self.bankroll -= bet.amount
        logger.debug("placed %r bankroll=%s", bet, self.bankroll)

    def place_line_bet(self, amount: float) -> PassLineBet:
        if self.line_bet is not None:
            raise InvariantViolation("A pass line bet is already working")
        bet = PassLineBet(amount)
        self._debit(bet)
        self.line_bet = bet
        return bet

    def place_come_bet(self, amount: float) -> ComeBet:
        if self.traveling_come_bet is not None:
            raise InvariantViolation("A come bet is already waiting for its point")
        bet = ComeBet(amount)
        self._debit(bet)
        self.come_bets.append(bet)
        return bet

    def odds_limit(self, parent: FlatBet, unit: float) -> float:
        """Largest odds bet the table allows behind `parent`, sized from `unit`."""
        if parent.point is None:
            return self.rules.odds_multiple * unit
        return self.rules.odds_multiple_for(parent.point) * unit

    def place_odds(self, parent: FlatBet, amount: float, unit: Optional[float] = None,
                   off_on_come_out: bool = False) -> OddsBet:
        """
        Attach an odds bet to a live line or come bet.

        Args:
            parent: The bet the odds back
            amount: Odds amount
            unit: Unit the odds limit is measured in (defaults to the parent's amount)
            off_on_come_out: Return the odds instead of settling them on come-out rolls
        """
        if parent is not self.line_bet and not any(parent is bet for bet in self.come_bets):
            raise InvariantViolation(f"Odds placed behind a bet that is not on the table: {parent!r}")
        if parent.odds is not None:
            raise InvariantViolation(f"{parent.name} already has odds")
        unit = parent.amount if unit is None else unit
        limit = self.odds_limit(parent, unit)
        if amount > limit:
            raise InvariantViolation(f"Odds of {amount} behind {parent.name} exceed limit {limit}")
        odds = OddsBet(amount, parent, unit, off_on_come_out)
        self._debit(odds)
        parent.odds = odds
        return odds

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def settle(self, roll: DiceRoll, phase: GamePhase) -> list[tuple[Bet, BetResult]]:
        """Resolve all active bets against a roll thrown in `phase`."""
        settlements: list[tuple[Bet, BetResult]] = []

        if self.line_bet is not None and self._settle_flat(self.line_bet, roll, phase, settlements):
            self.line_bet = None

        remaining = []
        for bet in self.come_bets:
            if not self._settle_flat(bet, roll, phase, settlements):
                remaining.append(bet)
        self.come_bets = remaining

        points = [bet.point for bet in remaining if bet.point is not None]
        if len(points) != len(set(points)):
            raise InvariantViolation(f"Come bets share a point: {sorted(points)}")

        return settlements

    def _settle_flat(self, bet: FlatBet, roll: DiceRoll, phase: GamePhase,
                     settlements: list[tuple[Bet, BetResult]]) -> bool:
        """Settle one flat bet and its odds. Returns True if the bet came down."""
        had_point = bet.point is not None
        result = bet.resolve(roll)

        if result is None:
            if not had_point and bet.odds is not None:
                self._trim_odds(bet.odds)
            return False

        self._apply(bet, result)
        settlements.append((bet, result))
        if bet.odds is not None:
            odds_result = bet.odds.settle(result, phase)
            self._apply(bet.odds, odds_result)
            settlements.append((bet.odds, odds_result))
            bet.odds = None
        return True

    def _trim_odds(self, odds: OddsBet) -> None:
        """Return odds committed early above the limit for the point the parent landed on."""
        limit = self.odds_limit(odds.parent, odds.unit)
        if odds.amount > limit:
            excess = odds.amount - limit
            odds.amount = limit
            self.bankroll += excess
            logger.debug("trimmed %r, returned %s", odds, excess)

    def _apply(self, bet: Bet, result: BetResult) -> None:
        bet.status = result.status
        if result.status == BetStatus.WON:
            self.bankroll += bet.amount + result.payout
        elif result.status == BetStatus.PUSH:
            self.bankroll += bet.amount
        if self.bankroll < 0:
            raise InvariantViolation(f"Bankroll went negative: {self.bankroll}")
        logger.debug("%s bankroll=%s", result.message, self.bankroll)
