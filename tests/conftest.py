"""Pytest configuration for the craps ruin simulator."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_repo_on_path() -> None:
    """Make the repository importable without an editable install."""
    repo_root = Path(__file__).resolve().parent.parent
    path_str = str(repo_root)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_repo_on_path()

from crapsruin.bets import BetLedger  # noqa: E402
from crapsruin.dice import SequenceDiceProvider  # noqa: E402
from crapsruin.game import CrapsGame, TableRules  # noqa: E402


class Table:
    """A game wired to a ledger the way the trial runner wires them."""

    def __init__(self, totals, bankroll=100, minimum_bet=5, odds_multiple=3):
        self.rules = TableRules(minimum_bet=minimum_bet, odds_multiple=odds_multiple)
        self.game = CrapsGame(SequenceDiceProvider.from_totals(totals))
        self.ledger = BetLedger(self.rules, bankroll)
        self.settlements = []
        self.game.on_roll(self._settle)

    def _settle(self, roll):
        self.settlements.extend(self.ledger.settle(roll, self.game.phase))

    def roll(self):
        return self.game.roll_dice()


@pytest.fixture
def make_table():
    return Table
