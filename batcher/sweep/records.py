"""batcher.sweep.records

The durable record: an append-only CSV of every successful backtest.

CSV schema (v1), in column order:
- identity: method, market, candle/history size
- performance: strategy vs market, profit, yearly profit, sharpe, alpha, downside
- window: backtest start/end, timespan, prices, trades, start balance
- config: the strategy parameters the service reported, as JSON

Rows are appended one at a time and fsynced before `append` returns. Existing
rows are never rewritten; a file with a different header is refused.
"""

from __future__ import annotations

import csv
import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from batcher.core.exceptions import RecordWriteError
from batcher.core.time import format_date, format_time, humanize_date
from batcher.core.types import Success

RECORD_SCHEMA_VERSION = 1


@dataclass(frozen=True, slots=True)
class Column:
    id: str
    title: str


RECORD_COLUMNS: tuple[Column, ...] = (
    Column("method", "Method"),
    Column("market_performance_percent", "Market performance (%)"),
    Column("relative_profit", "Strat performance (%)"),
    Column("profit", "Profit"),
    Column("run_date", "Run date"),
    Column("run_time", "Run time"),
    Column("start_date", "Start date"),
    Column("end_date", "End date"),
    Column("currency_pair", "Currency pair"),
    Column("candle_size", "Candle size"),
    Column("history_size", "History size"),
    Column("currency", "Currency"),
    Column("asset", "Asset"),
    Column("exchange", "Exchange"),
    Column("timespan", "Timespan"),
    Column("yearly_profit", "Yearly profit"),
    Column("yearly_profit_percent", "Yearly profit (%)"),
    Column("start_price", "Start price"),
    Column("end_price", "End price"),
    Column("trades", "Trades"),
    Column("start_balance", "Start balance"),
    Column("sharpe", "Sharpe"),
    Column("alpha", "Alpha"),
    Column("config", "Config"),
    Column("downside", "Downside"),
)

_IDS = [c.id for c in RECORD_COLUMNS]
_TITLES = [c.title for c in RECORD_COLUMNS]
_ID_BY_TITLE = {c.title: c.id for c in RECORD_COLUMNS}


def record_from_success(s: Success, *, run_at: datetime) -> dict[str, Any]:
    """Project a Success onto the record columns (keyed by column id)."""

    return {
        "method": s.method,
        "market_performance_percent": s.market_performance,
        "relative_profit": s.relative_profit,
        "profit": s.profit,
        "run_date": format_date(run_at),
        "run_time": format_time(run_at),
        "start_date": humanize_date(s.start_time),
        "end_date": humanize_date(s.end_time),
        "currency_pair": f"{s.currency}/{s.asset}".upper(),
        "candle_size": s.candle_size,
        "history_size": s.history_size,
        "currency": s.currency,
        "asset": s.asset,
        "exchange": s.exchange,
        "timespan": s.timespan,
        "yearly_profit": s.yearly_profit,
        "yearly_profit_percent": s.relative_yearly_profit,
        "start_price": s.start_price,
        "end_price": s.end_price,
        "trades": s.trades,
        "start_balance": s.start_balance,
        "sharpe": s.sharpe,
        "alpha": s.alpha,
        "config": json.dumps(s.strategy_parameters, sort_keys=True, default=str),
        "downside": s.downside,
    }


class CsvRecordSink:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.rows_written = 0

    def _check_header(self) -> bool:
        """Return True if the header still has to be written."""

        if not self.path.exists() or self.path.stat().st_size == 0:
            return True
        with self.path.open("r", encoding="utf-8", newline="") as f:
            header = next(csv.reader(f), [])
        if header != _TITLES:
            raise RecordWriteError(f"{self.path} has a different column set; refusing to append")
        return False

    def append(self, record: Mapping[str, Any]) -> None:
        """Append one row and fsync it.

        Raises:
            RecordWriteError: on any IO failure or an incompatible existing file.
        """

        row = {k: ("" if record.get(k) is None else record.get(k)) for k in _IDS}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            needs_header = self._check_header()
            with self.path.open("a", encoding="utf-8", newline="") as f:
                w = csv.writer(f)
                if needs_header:
                    w.writerow(_TITLES)
                w.writerow([row[k] for k in _IDS])
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise RecordWriteError(f"append to {self.path} failed: {e}") from e
        self.rows_written += 1


def read_records(path: str | Path) -> list[dict[str, str]]:
    """Read the record back, keyed by column id. Values stay strings."""

    p = Path(path)
    if not p.exists():
        return []
    with p.open("r", encoding="utf-8", newline="") as f:
        r = csv.DictReader(f)
        return [{_ID_BY_TITLE.get(k, k): v for k, v in row.items() if k is not None} for row in r]
