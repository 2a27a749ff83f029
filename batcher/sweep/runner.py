"""batcher.sweep.runner

One sweep, end to end:

1. load strategy settings and expand the space (fatal on bad config)
2. build one request per combination
3. run them through the bounded executor into the aggregator
4. render the summary

The caller owns nothing but the config; the client is created here unless one
is injected (tests pass a client with a mock transport).
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from batcher.core.client import BacktestClient
from batcher.core.config import Config
from batcher.core.metrics import MetricsRegistry
from batcher.core.types import DateRange, Error, ParameterCombination, TradingPair
from batcher.sweep.aggregator import Aggregator
from batcher.sweep.executor import BoundedExecutor, ErrorBoundary, JobFailure
from batcher.sweep.records import CsvRecordSink
from batcher.sweep.report import Reporter
from batcher.sweep.request import build_requests
from batcher.sweep.settings import StrategySettingsLoader
from batcher.sweep.space import expand_space

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SweepReport:
    total: int
    success: int
    empty: int
    error: int
    unprocessed: int
    record_path: Path
    errors: tuple[Error, ...]
    failures: tuple[JobFailure, ...]
    metrics: dict[str, float]


def plan(config: Config, *, rng: random.Random | None = None) -> list[ParameterCombination]:
    """Expand the configured space. Raises StrategySettingsError."""

    sweep = config.sweep
    pairs = [TradingPair(exchange=p.exchange, currency=p.currency, asset=p.asset) for p in sweep.trading_pairs]
    loader = StrategySettingsLoader(config.service.strategies_dir)
    return expand_space(
        sweep.candle_sizes,
        sweep.history_sizes,
        pairs,
        sweep.methods,
        loader=loader,
        shuffle=sweep.shuffle,
        rng=rng,
    )


async def run_sweep(
    config: Config,
    *,
    client: BacktestClient | None = None,
    console: Console | None = None,
    rng: random.Random | None = None,
) -> SweepReport:
    console = console or Console()
    combinations = plan(config, rng=rng)

    console.print(f"{len(combinations)} combinations")
    logger.info(
        "sweep_planned",
        extra={"combinations": len(combinations), "parallel_queries": config.sweep.parallel_queries},
    )

    daterange = DateRange(from_=config.sweep.daterange.from_, to=config.sweep.daterange.to)
    requests = build_requests(combinations, daterange)

    metrics = MetricsRegistry()
    record_path = config.results.path
    aggregator = Aggregator(CsvRecordSink(record_path), metrics=metrics)
    errors = ErrorBoundary()

    owns_client = client is None
    client = client or BacktestClient(config.service)
    try:
        executor = BoundedExecutor(
            lambda req: client.run_backtest(req.payload()),
            limit=config.sweep.parallel_queries,
            on_outcome=aggregator.handle,
            errors=errors,
            metrics=metrics,
        )
        summary = await executor.run(requests)
    finally:
        if owns_client:
            await client.aclose()

    logger.info(
        "sweep_finished",
        extra={
            "submitted": summary.submitted,
            "success": aggregator.success_count,
            "empty": aggregator.empty_count,
            "error": aggregator.error_count,
            "unprocessed": summary.unprocessed,
            "peak_in_flight": summary.peak_in_flight,
        },
    )

    Reporter(console, top_n=config.results.top_n).render(
        success_count=aggregator.success_count,
        rankings=aggregator.rankings,
        record_path=record_path,
    )

    return SweepReport(
        total=summary.submitted,
        success=aggregator.success_count,
        empty=aggregator.empty_count,
        error=aggregator.error_count,
        unprocessed=summary.unprocessed,
        record_path=record_path,
        errors=aggregator.errors,
        failures=errors.failures,
        metrics=metrics.snapshot(),
    )
