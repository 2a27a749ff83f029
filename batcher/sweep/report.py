"""batcher.sweep.report

End-of-sweep console summary.

Ranking is by strategy performance (relative profit) descending; ties are
broken by market performance, descending. Rows missing a value sort last.
Only the top N are shown; the CSV record always has everything.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.table import Table

from batcher.core.types import RankingRow

DEFAULT_TOP_N = 100

TABLE_HEADERS = (
    "Method",
    "Currency",
    "Asset",
    "Candle size",
    "History size",
    "Exchange",
    "Strategy performance (%)",
    "Market performance (%)",
)

NO_RESULTS = "There are no any results"


def _value(v: float | None) -> float:
    return float("-inf") if v is None else v


def rank_key(row: RankingRow) -> tuple[float, float]:
    return (_value(row.relative_profit), _value(row.market_performance))


def rank(rows: Sequence[RankingRow], top_n: int = DEFAULT_TOP_N) -> list[RankingRow]:
    return sorted(rows, key=rank_key, reverse=True)[: max(top_n, 0)]


@dataclass(frozen=True, slots=True)
class Report:
    rows: list[RankingRow]
    total: int
    truncated: bool


def _fmt(v: float | None) -> str:
    return "" if v is None else f"{v:g}"


def build_table(rows: Sequence[RankingRow]) -> Table:
    table = Table(show_header=True, header_style="bold")
    for header in TABLE_HEADERS:
        table.add_column(header, overflow="fold")
    for r in rows:
        table.add_row(
            r.method,
            r.currency,
            r.asset,
            str(r.candle_size),
            str(r.history_size),
            r.exchange,
            _fmt(r.relative_profit),
            _fmt(r.market_performance),
        )
    return table


class Reporter:
    def __init__(self, console: Console | None = None, *, top_n: int = DEFAULT_TOP_N) -> None:
        self.console = console or Console()
        self.top_n = top_n

    def render(self, *, success_count: int, rankings: Sequence[RankingRow], record_path: str | Path) -> Report:
        if success_count == 0:
            self.console.print(NO_RESULTS, style="red")
            return Report(rows=[], total=0, truncated=False)

        rows = rank(rankings, self.top_n)
        truncated = len(rankings) > self.top_n
        if truncated:
            self.console.print(f"{self.top_n} most profitable results:")
        else:
            self.console.print("Results:")

        self.console.print(build_table(rows))
        self.console.print(f"See full results in {record_path}", style="#fafafa on #00bf79")
        return Report(rows=rows, total=len(rankings), truncated=truncated)
