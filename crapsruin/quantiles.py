"""
Quantile summaries of trial metrics.

Quantiles use the nearest-rank method: the series is sorted ascending and
fraction f picks index floor(f * (n - 1) + 0.5), so halves round up. The
result is always an observed value, q0 is the minimum and q1 the maximum.
"""
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

DEFAULT_QUANTILES = (0.0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0)
METRICS = ("rolls", "max_bankroll")


def nearest_rank_quantiles(values: Iterable[float],
                           fractions: Sequence[float] = DEFAULT_QUANTILES) -> dict[float, float]:
    """
    Value at each fraction of the sorted series.

    Raises:
        ValueError: If the series is empty or a fraction is outside [0, 1]
    """
    data = np.sort(np.asarray(list(values)))
    if data.size == 0:
        raise ValueError("Cannot take quantiles of an empty series")

    ordered = np.asarray(sorted(fractions), dtype=float)
    if ordered.size and (ordered[0] < 0 or ordered[-1] > 1):
        raise ValueError(f"Quantile fractions must be within [0, 1]: {list(fractions)}")

    indices = np.floor(ordered * (data.size - 1) + 0.5).astype(int)
    return {float(f): data[i].item() for f, i in zip(ordered, indices)}


@dataclass
class QuantileReport:
    """Quantiles per metric name."""
    metrics: dict[str, dict[float, float]] = field(default_factory=dict)

    @classmethod
    def from_results(cls, results: Sequence, fractions: Sequence[float] = DEFAULT_QUANTILES,
                     metrics: Sequence[str] = METRICS) -> "QuantileReport":
        return cls({
            name: nearest_rank_quantiles([getattr(r, name) for r in results], fractions)
            for name in metrics
        })

    def __getitem__(self, metric: str) -> dict[float, float]:
        return self.metrics[metric]

    def median(self, metric: str) -> float:
        return self.metrics[metric][0.5]

    def as_dict(self) -> dict[str, dict[float, float]]:
        return {name: dict(values) for name, values in self.metrics.items()}


def summarize(results: Sequence, fractions: Sequence[float] = DEFAULT_QUANTILES) -> QuantileReport:
    """Quantile report for the roll counts and peak bankrolls of a scenario."""
    return QuantileReport.from_results(results, fractions)
