"""
Text tables and CSV output for scenario results.
"""
import csv
import logging
from pathlib import Path
from typing import Iterable, Sequence, TextIO, Union

from .quantiles import QuantileReport
from .runner import TrialResult

logger = logging.getLogger(__name__)

CSV_FIELDS = ["label", "trial", "rolls", "max_bankroll", "final_bankroll",
              "points_made", "seven_outs"]

METRIC_TITLES = {
    "rolls": "roll-count stats:",
    "max_bankroll": "max-bankroll stats:",
}


def _format_value(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def format_quantiles(report: QuantileReport, label: str = "") -> str:
    """Render a report as one block per metric, one line per quantile."""
    lines = []
    if label:
        lines.append(f"[{label}]")
    for metric, values in report.metrics.items():
        lines.append(METRIC_TITLES.get(metric, f"{metric} stats:"))
        for fraction, value in values.items():
            q = f"q{fraction:g}"
            lines.append(f"{q:>10}: {_format_value(value):>10}")
    return "\n".join(lines)


def write_trials_csv(target: Union[str, Path, TextIO],
                     labelled_results: Iterable[tuple[str, Sequence[TrialResult]]],
                     append: bool = False) -> int:
    """
    Write one row per trial, sorted by roll count within each label.

    Returns the number of rows written.
    """
    if isinstance(target, (str, Path)):
        path = Path(target)
        write_header = not (append and path.exists() and path.stat().st_size > 0)
        with path.open("a" if append else "w", newline="", encoding="utf-8") as fh:
            rows = _write_rows(fh, labelled_results, write_header)
        logger.info("wrote %d rows to %s", rows, path)
        return rows
    return _write_rows(target, labelled_results, write_header=True)


def _write_rows(fh: TextIO, labelled_results, write_header: bool) -> int:
    writer = csv.DictWriter(fh, fieldnames=CSV_FIELDS)
    if write_header:
        writer.writeheader()
    count = 0
    for label, results in labelled_results:
        indexed = sorted(enumerate(results), key=lambda pair: (pair[1].rolls, pair[0]))
        for trial, result in indexed:
            writer.writerow({
                "label": label,
                "trial": trial,
                "rolls": result.rolls,
                "max_bankroll": result.max_bankroll,
                "final_bankroll": result.final_bankroll,
                "points_made": result.points_made,
                "seven_outs": result.seven_outs,
            })
            count += 1
    return count
