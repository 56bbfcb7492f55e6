import random

import pytest

from crapsruin.quantiles import DEFAULT_QUANTILES, QuantileReport, nearest_rank_quantiles, summarize
from crapsruin.runner import TrialResult


def test_nearest_rank_picks_observed_values():
    q = nearest_rank_quantiles([5, 1, 4, 2, 3])
    assert q == {
        0.0: 1, 0.1: 1, 0.2: 2, 0.3: 2, 0.4: 3, 0.5: 3,
        0.6: 3, 0.7: 4, 0.8: 4, 0.9: 5, 1.0: 5,
    }


def test_halfway_rank_rounds_up():
    assert nearest_rank_quantiles([20, 10], [0.5]) == {0.5: 20}


def test_single_value_series():
    assert set(nearest_rank_quantiles([7]).values()) == {7}


def test_quantiles_are_monotonic_with_min_and_max_at_the_ends():
    rng = random.Random(8)
    for size in (2, 3, 10, 101, 1000):
        values = [rng.randint(0, 10_000) for _ in range(size)]
        q = nearest_rank_quantiles(values)
        series = [q[f] for f in DEFAULT_QUANTILES]
        assert series == sorted(series)
        assert q[0.0] == min(values)
        assert q[1.0] == max(values)


def test_fractions_come_back_in_ascending_order():
    q = nearest_rank_quantiles([1, 2, 3], [1.0, 0.0, 0.5])
    assert list(q) == [0.0, 0.5, 1.0]


def test_bad_input():
    with pytest.raises(ValueError):
        nearest_rank_quantiles([])
    with pytest.raises(ValueError):
        nearest_rank_quantiles([1, 2], [1.5])


def test_report_covers_both_metrics():
    results = [TrialResult(rolls=r, max_bankroll=m) for r, m in [(10, 300), (40, 450), (25, 300.5)]]
    report = summarize(results)
    assert isinstance(report, QuantileReport)
    assert set(report.as_dict()) == {"rolls", "max_bankroll"}
    assert report.median("rolls") == 25
    assert report["max_bankroll"][1.0] == 450
    assert report["max_bankroll"][0.0] == 300
