from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from batcher.core.exceptions import RecordWriteError
from batcher.core.types import Success
from batcher.sweep.classifier import classify
from batcher.sweep.records import RECORD_COLUMNS, CsvRecordSink, read_records, record_from_success
from tests.unit._sweep_factories import make_request, service_report

RUN_AT = datetime(2024, 3, 5, 9, 30, tzinfo=UTC)


def _success() -> Success:
    out = classify(make_request(), service_report())
    assert isinstance(out, Success)
    return out


def test_record_columns_are_fixed() -> None:
    ids = [c.id for c in RECORD_COLUMNS]
    assert ids[0] == "method"
    assert ids[-1] == "downside"
    assert len(ids) == len(set(ids)) == 25


def test_record_from_success_fields() -> None:
    rec = record_from_success(_success(), run_at=RUN_AT)
    assert rec["currency_pair"] == "USDT/BTC"
    assert rec["run_date"] == "Mar 5, 2024"
    assert rec["run_time"] == "9:30 AM"
    assert rec["start_date"] == "Jan 1, 2018 12:00 AM"
    assert rec["end_date"] == "Feb 1, 2018 12:00 AM"
    assert json.loads(rec["config"]) == {"interval": 14, "thresholds": {"high": 70, "low": 30}}


def test_append_writes_header_once(tmp_path: Path) -> None:
    path = tmp_path / "results" / "batch.csv"
    sink = CsvRecordSink(path)
    rec = record_from_success(_success(), run_at=RUN_AT)
    sink.append(rec)
    sink.append(rec)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("Method,Market performance (%),Strat performance (%)")
    assert sum(1 for line in lines if line.startswith("Method,")) == 1
    assert sink.rows_written == 2
    assert len(read_records(path)) == 2


def test_round_trip_reproduces_rounded_metrics(tmp_path: Path) -> None:
    s = _success()
    sink = CsvRecordSink(tmp_path / "batch.csv")
    sink.append(record_from_success(s, run_at=RUN_AT))

    (row,) = read_records(sink.path)
    assert row["method"] == s.method
    assert row["exchange"] == s.exchange
    assert row["currency"] == s.currency
    assert row["asset"] == s.asset
    assert int(row["candle_size"]) == s.candle_size
    assert int(row["history_size"]) == s.history_size
    assert float(row["relative_profit"]) == s.relative_profit
    assert float(row["market_performance_percent"]) == s.market_performance
    assert float(row["profit"]) == s.profit
    assert float(row["sharpe"]) == s.sharpe
    assert float(row["alpha"]) == s.alpha
    assert float(row["downside"]) == s.downside
    assert float(row["yearly_profit"]) == s.yearly_profit
    assert float(row["yearly_profit_percent"]) == s.relative_yearly_profit
    assert int(row["trades"]) == s.trades
    assert json.loads(row["config"]) == s.strategy_parameters


def test_missing_values_are_blank(tmp_path: Path) -> None:
    raw = service_report()
    del raw["performanceReport"]["alpha"]
    s = classify(make_request(), raw)
    sink = CsvRecordSink(tmp_path / "batch.csv")
    sink.append(record_from_success(s, run_at=RUN_AT))
    (row,) = read_records(sink.path)
    assert row["alpha"] == ""


def test_append_refuses_foreign_header(tmp_path: Path) -> None:
    path = tmp_path / "batch.csv"
    path.write_text("a,b,c\n1,2,3\n", encoding="utf-8")
    with pytest.raises(RecordWriteError):
        CsvRecordSink(path).append(record_from_success(_success(), run_at=RUN_AT))
    assert path.read_text(encoding="utf-8") == "a,b,c\n1,2,3\n"


def test_append_wraps_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    sink = CsvRecordSink(blocker / "batch.csv")
    with pytest.raises(RecordWriteError):
        sink.append(record_from_success(_success(), run_at=RUN_AT))
    assert sink.rows_written == 0


def test_read_records_missing_file(tmp_path: Path) -> None:
    assert read_records(tmp_path / "nope.csv") == []
