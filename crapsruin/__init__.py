# Craps Ruin Simulator Package
from .game import CrapsGame, GamePhase, DiceRoll, TableRules
from .dice import DiceProvider, RandomDiceProvider, SequenceDiceProvider, spawn_dice_providers
from .bets import BetLedger, BetResult, BetStatus, PassLineBet, ComeBet, OddsBet
from .bankroll import BankrollTracker
from .strategy import ComeOddsStrategy, MilestoneGrowth, flat_unit
from .runner import SimulationConfig, TrialRunner, TrialResult, ScenarioRunner
from .quantiles import DEFAULT_QUANTILES, QuantileReport, nearest_rank_quantiles, summarize
from .errors import ConfigError, InvariantViolation, TrialFailed
