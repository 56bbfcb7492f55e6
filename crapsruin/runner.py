"""
Trial and scenario runners.

A trial plays one session from the starting bankroll until the player can
no longer cover a bet. A scenario repeats trials under one configuration,
each trial with its own dice stream.
"""
import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Optional

from .bankroll import BankrollTracker
from .bets import BetLedger
from .dice import DiceProvider, spawn_dice_providers
from .errors import ConfigError, InvariantViolation, TrialFailed
from .game import CrapsGame, TableRules
from .strategy import ComeOddsStrategy, MilestoneGrowth

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for a scenario run."""
    min_bet: float = 5
    odds_multiple: int = 3
    initial_bankroll: float = 300
    n_trials: int = 1000
    grow_bets: bool = False
    grow_odds: bool = False
    odds_off_without_point: bool = False
    rng_seed: Optional[int] = None
    max_come_bets: int = 6
    growth_step: Optional[float] = None  # Defaults to 20 table minimums
    max_rolls: Optional[int] = None      # Safety cap per trial
    workers: int = 1
    label: str = ""

    def __post_init__(self):
        if self.min_bet <= 0:
            raise ConfigError("min_bet must be positive")
        if self.initial_bankroll < self.min_bet:
            raise ConfigError("initial_bankroll must cover at least one min_bet")
        if self.n_trials <= 0:
            raise ConfigError("n_trials must be positive")
        if self.odds_multiple < 1:
            raise ConfigError("odds_multiple must be at least 1")
        if self.max_come_bets < 0:
            raise ConfigError("max_come_bets cannot be negative")
        if self.growth_step is not None and self.growth_step <= 0:
            raise ConfigError("growth_step must be positive")
        if self.max_rolls is not None and self.max_rolls <= 0:
            raise ConfigError("max_rolls must be positive")
        if self.workers < 1:
            raise ConfigError("workers must be at least 1")

    @property
    def table_rules(self) -> TableRules:
        return TableRules(minimum_bet=self.min_bet, odds_multiple=self.odds_multiple)

    def build_strategy(self) -> ComeOddsStrategy:
        rules = self.table_rules
        sizer = MilestoneGrowth(self.growth_step) if self.growth_step else None
        return ComeOddsStrategy(
            rules,
            max_come_bets=self.max_come_bets,
            grow_bets=self.grow_bets,
            grow_odds=self.grow_odds,
            odds_off_without_point=self.odds_off_without_point,
            sizer=sizer,
        )


@dataclass(frozen=True)
class TrialResult:
    """Metrics for one session played to ruin."""
    rolls: int
    max_bankroll: float
    final_bankroll: float = 0.0
    points_made: int = 0
    seven_outs: int = 0


class TrialRunner:
    """Plays one session with a fresh game, ledger and tracker."""

    def __init__(self, config: SimulationConfig, dice_provider: DiceProvider):
        self.config = config
        self.dice_provider = dice_provider

    def run(self) -> TrialResult:
        """
        Play until no bet is outstanding and the bankroll cannot cover a new one.

        Raises:
            InvariantViolation: If bet accounting breaks or the trial runs
                past `max_rolls`
        """
        config = self.config
        game = CrapsGame(self.dice_provider)
        ledger = BetLedger(config.table_rules, config.initial_bankroll)
        strategy = config.build_strategy()
        tracker = BankrollTracker(config.initial_bankroll)

        game.on_roll(lambda roll: ledger.settle(roll, game.phase))
        game.on_point_won(lambda point: tracker.record_point_made())
        game.on_seven_out(tracker.record_seven_out)

        while True:
            strategy.place_bets(ledger, game)
            # With nothing on the table the player sits out until the next
            # come-out, as long as the minimum is still covered
            if not ledger.has_outstanding_bets and ledger.bankroll < config.min_bet:
                break

            if config.max_rolls is not None and tracker.roll_count >= config.max_rolls:
                raise InvariantViolation(f"Trial still running after {config.max_rolls} rolls")

            game.roll_dice()
            if ledger.line_bet is not None and ledger.line_bet.point != game.point:
                raise InvariantViolation(
                    f"Pass line on {ledger.line_bet.point} but table point is {game.point}"
                )
            tracker.record_roll(ledger.bankroll)

        logger.debug("trial over after %d rolls, bankroll=%s max=%s",
                     tracker.roll_count, ledger.bankroll, tracker.max_bankroll)
        return TrialResult(**tracker.get_session_stats())


def _run_trial(task: tuple[int, SimulationConfig, DiceProvider]) -> TrialResult:
    index, config, dice_provider = task
    try:
        return TrialRunner(config, dice_provider).run()
    except InvariantViolation as exc:
        raise TrialFailed(index, exc) from exc


class ScenarioRunner:
    """
    Runs `n_trials` independent trials under one configuration.

    Results come back in trial order. With `workers > 1` trials are spread
    over a process pool; the dice streams are fixed up front so the results
    match a sequential run with the same seed.
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.results: list[TrialResult] = []

    def run(self) -> list[TrialResult]:
        config = self.config
        providers = spawn_dice_providers(config.rng_seed, config.n_trials)
        tasks = [(i, config, provider) for i, provider in enumerate(providers)]

        logger.info("running %d trials%s (workers=%d)", config.n_trials,
                    f" [{config.label}]" if config.label else "", config.workers)
        try:
            if config.workers == 1:
                self.results = [_run_trial(task) for task in tasks]
            else:
                chunksize = max(1, len(tasks) // (config.workers * 4))
                with ProcessPoolExecutor(max_workers=config.workers) as pool:
                    self.results = list(pool.map(_run_trial, tasks, chunksize=chunksize))
        except TrialFailed as exc:
            logger.error("%s", exc)
            raise

        logger.info("finished %d trials, %d rolls total", len(self.results),
                    sum(r.rolls for r in self.results))
        return self.results
