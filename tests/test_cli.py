import csv
import io

import pytest

from crapsruin.cli import main
from crapsruin.quantiles import QuantileReport
from crapsruin.report import CSV_FIELDS, format_quantiles, write_trials_csv
from crapsruin.runner import TrialResult


def test_format_quantiles_layout():
    report = QuantileReport({"rolls": {0.0: 3, 0.5: 12, 1.0: 40}, "max_bankroll": {0.5: 312.5}})
    lines = format_quantiles(report, label="flat").splitlines()
    assert lines[0] == "[flat]"
    assert lines[1] == "roll-count stats:"
    assert lines[2] == f"{'q0':>10}: {'3':>10}"
    assert lines[3] == f"{'q0.5':>10}: {'12':>10}"
    assert lines[5] == "max-bankroll stats:"
    assert lines[6].endswith("312.50")


def test_csv_rows_sorted_by_rolls_within_label():
    results = [TrialResult(rolls=30, max_bankroll=310), TrialResult(rolls=5, max_bankroll=300)]
    buf = io.StringIO()
    assert write_trials_csv(buf, [("flat", results)]) == 2
    rows = list(csv.DictReader(io.StringIO(buf.getvalue())))
    assert [r["rolls"] for r in rows] == ["5", "30"]
    assert [r["trial"] for r in rows] == ["1", "0"]
    assert list(rows[0]) == CSV_FIELDS


def test_main_prints_quantile_tables(capsys):
    assert main(["--n-trials", "5", "--bankroll", "30", "--seed", "7"]) == 0
    out = capsys.readouterr().out
    assert "roll-count stats:" in out
    assert "max-bankroll stats:" in out
    assert out.count("q0.5") == 2


def test_main_compare_writes_csv(tmp_path, capsys):
    path = tmp_path / "grow-bets.csv"
    argv = ["--n-trials", "4", "--bankroll", "30", "--seed", "1", "--compare", "--csv", str(path)]
    assert main(argv) == 0
    with path.open(newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert len(rows) == 16
    assert {r["label"] for r in rows} == {"flat", "grow-bets", "grow-odds", "grow-both"}

    assert main(argv + ["--append"]) == 0
    with path.open(newline="") as fh:
        assert len(list(csv.DictReader(fh))) == 32
    assert "[grow-both]" in capsys.readouterr().out


def test_main_rejects_bad_config(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--n-trials", "0"])
    assert excinfo.value.code == 2
    assert "n_trials" in capsys.readouterr().err


def test_main_reports_failed_trial(capsys):
    assert main(["--n-trials", "2", "--seed", "1", "--max-rolls", "1"]) == 1
    assert "Trial 0 failed" in capsys.readouterr().err
