from __future__ import annotations

import io
import random

from rich.console import Console

from batcher.core.types import RankingRow
from batcher.sweep.report import NO_RESULTS, Reporter, rank


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=200, color_system=None, force_terminal=False), buf


def _row(rp: float | None, mp: float | None = 0.0, method: str = "RSI") -> RankingRow:
    return RankingRow(
        method=method,
        currency="USDT",
        asset="BTC",
        candle_size=60,
        history_size=10,
        exchange="binance",
        relative_profit=rp,
        market_performance=mp,
    )


def test_no_results_path() -> None:
    console, buf = _console()
    report = Reporter(console).render(success_count=0, rankings=[], record_path="results/batch.csv")

    out = buf.getvalue()
    assert out.strip() == NO_RESULTS
    assert report.rows == []
    assert "Method" not in out


def test_truncates_to_top_100_sorted_descending() -> None:
    values = [float(i) for i in range(150)]
    random.Random(5).shuffle(values)
    rows = [_row(v) for v in values]

    console, buf = _console()
    report = Reporter(console).render(success_count=150, rankings=rows, record_path="results/batch.csv")

    assert len(report.rows) == 100
    assert report.truncated
    assert report.total == 150
    assert [r.relative_profit for r in report.rows] == [float(i) for i in range(149, 49, -1)]

    out = buf.getvalue()
    assert "100 most profitable results:" in out
    assert "See full results in results/batch.csv" in out
    assert "Strategy performance (%)" in out


def test_small_result_set_is_not_truncated() -> None:
    console, buf = _console()
    report = Reporter(console).render(success_count=2, rankings=[_row(1.0), _row(2.0)], record_path="x.csv")
    assert not report.truncated
    assert [r.relative_profit for r in report.rows] == [2.0, 1.0]
    out = buf.getvalue()
    assert "Results:" in out
    assert "most profitable" not in out
    assert "See full results in x.csv" in out


def test_ties_break_on_market_performance() -> None:
    rows = [_row(5.0, -1.0, "A"), _row(5.0, 3.0, "B"), _row(7.0, -9.0, "C"), _row(5.0, 1.0, "D")]
    assert [r.method for r in rank(rows)] == ["C", "B", "D", "A"]


def test_missing_values_sort_last() -> None:
    rows = [_row(None, 10.0, "N"), _row(-50.0, 0.0, "L"), _row(1.0, None, "P")]
    assert [r.method for r in rank(rows)] == ["P", "L", "N"]


def test_rank_respects_top_n() -> None:
    rows = [_row(float(i)) for i in range(10)]
    assert len(rank(rows, 3)) == 3
    assert rank(rows, 0) == []
