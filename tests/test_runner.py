import statistics

import pytest

from crapsruin.dice import SequenceDiceProvider
from crapsruin.errors import ConfigError, InvariantViolation, TrialFailed
from crapsruin.quantiles import summarize
from crapsruin.runner import ScenarioRunner, SimulationConfig, TrialResult, TrialRunner


def test_scripted_trial_to_ruin():
    config = SimulationConfig(min_bet=5, odds_multiple=3, initial_bankroll=20,
                              n_trials=1, max_come_bets=0)
    # point 6 made with odds, point 4 sevened out, then six come-out craps
    dice = SequenceDiceProvider.from_totals([6, 6, 4, 7, 2, 2, 2, 2, 2, 2])

    result = TrialRunner(config, dice).run()

    assert result == TrialResult(rolls=10, max_bankroll=43, final_bankroll=3,
                                 points_made=1, seven_outs=1)
    assert dice.remaining == 0


def test_trial_that_never_gets_ahead_keeps_initial_peak():
    config = SimulationConfig(min_bet=5, initial_bankroll=10, n_trials=1)
    result = TrialRunner(config, SequenceDiceProvider.from_totals([3, 12])).run()
    assert result.rolls == 2
    assert result.max_bankroll == 10
    assert result.final_bankroll == 0


def test_runaway_trial_is_halted():
    config = SimulationConfig(initial_bankroll=200, n_trials=1, max_rolls=1)
    dice = SequenceDiceProvider.from_totals([7, 7, 7])
    with pytest.raises(InvariantViolation):
        TrialRunner(config, dice).run()


def test_scenario_wraps_invariant_violation_with_trial_index():
    config = SimulationConfig(initial_bankroll=200, n_trials=3, rng_seed=1, max_rolls=1)
    with pytest.raises(TrialFailed) as excinfo:
        ScenarioRunner(config).run()
    assert excinfo.value.trial_index == 0
    assert isinstance(excinfo.value.__cause__, InvariantViolation)


@pytest.mark.parametrize("kwargs", [
    {"min_bet": 0},
    {"min_bet": -1},
    {"min_bet": 5, "initial_bankroll": 4},
    {"n_trials": 0},
    {"odds_multiple": 0},
    {"max_come_bets": -1},
    {"growth_step": 0},
    {"workers": 0},
    {"max_rolls": 0},
])
def test_invalid_config_rejected_before_running(kwargs):
    with pytest.raises(ConfigError):
        SimulationConfig(**kwargs)


@pytest.fixture(scope="module")
def reference_scenario():
    config = SimulationConfig(initial_bankroll=200, min_bet=5, odds_multiple=3,
                              n_trials=100, rng_seed=20240501)
    return config, ScenarioRunner(config).run()


def test_every_trial_ends_in_ruin(reference_scenario):
    config, results = reference_scenario
    assert len(results) == config.n_trials
    for result in results:
        assert result.rolls > 0
        assert result.max_bankroll >= config.initial_bankroll
        assert 0 <= result.final_bankroll < config.min_bet


def test_reference_scenario_quantiles(reference_scenario):
    config, results = reference_scenario
    report = summarize(results)
    rolls = report["rolls"]
    assert rolls[0.0] < rolls[0.5] < rolls[1.0]
    assert report["max_bankroll"][0.5] >= config.initial_bankroll


def test_same_seed_same_results():
    config = SimulationConfig(initial_bankroll=50, n_trials=25, rng_seed=11)
    assert ScenarioRunner(config).run() == ScenarioRunner(config).run()


def test_process_pool_matches_sequential():
    config = SimulationConfig(initial_bankroll=40, n_trials=12, rng_seed=3)
    sequential = ScenarioRunner(config).run()
    parallel = ScenarioRunner(SimulationConfig(initial_bankroll=40, n_trials=12,
                                               rng_seed=3, workers=2)).run()
    assert parallel == sequential


def test_growing_bets_shorten_sessions():
    flat = SimulationConfig(initial_bankroll=200, n_trials=150, rng_seed=77)
    grown = SimulationConfig(initial_bankroll=200, n_trials=150, rng_seed=77, grow_bets=True)
    flat_rolls = [r.rolls for r in ScenarioRunner(flat).run()]
    grown_rolls = [r.rolls for r in ScenarioRunner(grown).run()]
    assert statistics.median(grown_rolls) < statistics.median(flat_rolls)


def test_odds_off_variant_runs_to_ruin():
    config = SimulationConfig(initial_bankroll=60, n_trials=20, rng_seed=5,
                              odds_off_without_point=True, grow_odds=True)
    for result in ScenarioRunner(config).run():
        assert result.final_bankroll < config.min_bet
