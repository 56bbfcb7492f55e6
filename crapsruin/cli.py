"""
Command line front end: run a scenario (or the four growth variants) and
print quantile tables, optionally writing every trial to CSV.
"""
import argparse
import dataclasses
import logging
import sys
from typing import Optional, Sequence

from .errors import ConfigError, TrialFailed
from .logging_utils import setup_logging
from .quantiles import summarize
from .report import format_quantiles, write_trials_csv
from .runner import ScenarioRunner, SimulationConfig

logger = logging.getLogger(__name__)

COMPARE_VARIANTS = (
    ("flat", False, False),
    ("grow-bets", True, False),
    ("grow-odds", False, True),
    ("grow-both", True, True),
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="crapsruin",
        description="Play pass/come with max odds to ruin and report quantiles "
                    "of session length and peak bankroll.",
    )
    p.add_argument("--n-trials", type=int, required=True, help="Trials per scenario")
    p.add_argument("--min-bet", type=float, default=5, help="Table minimum (default 5)")
    p.add_argument("--odds-multiple", type=int, default=3,
                   help="Odds on 6/8; 5/9 get one less, 4/10 two less (default 3)")
    p.add_argument("--bankroll", type=float, default=300, help="Starting bankroll (default 300)")
    p.add_argument("--grow-bets", action="store_true", help="Grow line and come bets with the bankroll")
    p.add_argument("--grow-odds", action="store_true", help="Grow odds bets with the bankroll")
    p.add_argument("--odds-off-without-point", action="store_true",
                   help="Back come bets only once they have a point; their odds are off on come-outs")
    p.add_argument("--max-come-bets", type=int, default=6, help="Most come bets working at once")
    p.add_argument("--growth-step", type=float, default=None,
                   help="Bankroll per extra betting unit when growing (default 20 minimums)")
    p.add_argument("--max-rolls", type=int, default=None, help="Abort a trial past this many rolls")
    p.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    p.add_argument("--workers", type=int, default=1, help="Worker processes (default 1)")
    p.add_argument("--compare", action="store_true",
                   help="Run all four grow-bets/grow-odds variants with the same seed")
    p.add_argument("--csv", default=None, help="Write every trial to this CSV file")
    p.add_argument("--append", action="store_true", help="Append to --csv instead of overwriting")
    p.add_argument("--label", default="", help="Label for the CSV rows")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG")
    return p


def _config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        min_bet=args.min_bet,
        odds_multiple=args.odds_multiple,
        initial_bankroll=args.bankroll,
        n_trials=args.n_trials,
        grow_bets=args.grow_bets,
        grow_odds=args.grow_odds,
        odds_off_without_point=args.odds_off_without_point,
        rng_seed=args.seed,
        max_come_bets=args.max_come_bets,
        growth_step=args.growth_step,
        max_rolls=args.max_rolls,
        workers=args.workers,
        label=args.label,
    )


def _default_label(config: SimulationConfig) -> str:
    for label, grow_bets, grow_odds in COMPARE_VARIANTS:
        if (config.grow_bets, config.grow_odds) == (grow_bets, grow_odds):
            return label
    return "scenario"


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        base = _config_from_args(args)
        if args.compare:
            configs = [
                dataclasses.replace(base, grow_bets=gb, grow_odds=go, label=label)
                for label, gb, go in COMPARE_VARIANTS
            ]
        else:
            configs = [dataclasses.replace(base, label=base.label or _default_label(base))]
    except ConfigError as exc:
        parser.error(str(exc))

    labelled = []
    try:
        for config in configs:
            results = ScenarioRunner(config).run()
            labelled.append((config.label, results))
            print(format_quantiles(summarize(results), label=config.label if args.compare else ""))
    except TrialFailed as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.csv:
        write_trials_csv(args.csv, labelled, append=args.append)
    return 0
