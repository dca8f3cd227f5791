"""Tests for result finalisation and the plain-text report
(holdem_equity/analysis/results.py, holdem_equity/analysis/report.py).

Finalisation is checked against hand-built counters so the arithmetic is
exact; the report tests only verify layout and headers.
"""

from __future__ import annotations

import numpy as np
import pytest

from holdem_equity.analysis.report import format_equity_table, print_equity_report
from holdem_equity.analysis.results import PlayerResult, finalize
from holdem_equity.solvers.equity import SimStats


@pytest.fixture
def stats() -> SimStats:
    return SimStats(
        wins=np.array([6, 2], dtype=np.int64),
        ties=np.array([2, 2], dtype=np.int64),
        losses=np.array([2, 6], dtype=np.int64),
        equity=np.array([7.0, 3.0]),
        total_boards=10,
    )


# ─── finalize ─────────────────────────────────────────────────────────────────


class TestFinalize:
    def test_percentages(self, stats: SimStats) -> None:
        results = finalize(stats)
        assert results[0] == PlayerResult(win_pct=60.0, tie_pct=20.0, loss_pct=20.0, equity_pct=70.0)
        assert results[1] == PlayerResult(win_pct=20.0, tie_pct=20.0, loss_pct=60.0, equity_pct=30.0)

    def test_one_result_per_player(self, stats: SimStats) -> None:
        assert len(finalize(stats)) == 2

    def test_zero_boards_all_zero(self) -> None:
        results = finalize(SimStats.empty(3))
        assert results == [PlayerResult(0.0, 0.0, 0.0, 0.0)] * 3

    def test_result_is_frozen(self, stats: SimStats) -> None:
        result = finalize(stats)[0]
        with pytest.raises(AttributeError):
            result.win_pct = 1.0  # type: ignore[misc]

    def test_str(self, stats: SimStats) -> None:
        assert str(finalize(stats)[0]) == "Win 60.00% | Tie 20.00% | Loss 20.00% | Equity 70.00%"


# ─── format_equity_table ──────────────────────────────────────────────────────


class TestFormatEquityTable:
    def test_header_and_rows(self, stats: SimStats) -> None:
        lines = format_equity_table(finalize(stats)).splitlines()
        assert "Equity %" in lines[0]
        assert len(lines) == 4
        assert lines[2].split()[0] == "P1"
        assert lines[3].split()[0] == "P2"

    def test_values_formatted(self, stats: SimStats) -> None:
        table = format_equity_table(finalize(stats), ["As Ks", "Td Tc"])
        row = table.splitlines()[2]
        assert row.startswith("  As Ks")
        assert "60.00" in row and "70.00" in row

    def test_label_mismatch(self, stats: SimStats) -> None:
        with pytest.raises(ValueError):
            format_equity_table(finalize(stats), ["only one"])


# ─── print_equity_report ──────────────────────────────────────────────────────


class TestPrintEquityReport:
    def test_output_contains_board(self, stats: SimStats, capsys: pytest.CaptureFixture) -> None:
        print_equity_report(finalize(stats), board="Qs Js 9h")
        captured = capsys.readouterr()
        assert "Qs Js 9h" in captured.out
        assert "Equity %" in captured.out

    def test_empty_board_label(self, stats: SimStats, capsys: pytest.CaptureFixture) -> None:
        print_equity_report(finalize(stats))
        assert "board: none" in capsys.readouterr().out
