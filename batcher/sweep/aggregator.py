"""batcher.sweep.aggregator

Sweep-wide result state.

One Aggregator per sweep, handed to the executor. For a Success the durable
record is written first; only after that append returns are the counter and
the ranking updated. A failed write therefore leaves no trace in memory:

    success_count == len(rankings) == records written

holds after every handled outcome.

Empty and Error outcomes are logged and counted, never ranked or recorded.
Errors are also kept on `errors` so callers can assert on them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from batcher.core.metrics import MetricsRegistry
from batcher.core.time import utc_now
from batcher.core.types import Empty, Error, JobOutcome, RankingRow, Success
from batcher.sweep.records import record_from_success

logger = logging.getLogger(__name__)


class RecordSink(Protocol):
    def append(self, record: dict) -> None: ...


class Aggregator:
    def __init__(
        self,
        sink: RecordSink,
        *,
        metrics: MetricsRegistry | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.sink = sink
        self.metrics = metrics or MetricsRegistry()
        self._clock = clock
        self._success_count = 0
        self._empty_count = 0
        self._rankings: list[RankingRow] = []
        self._errors: list[Error] = []

    @property
    def success_count(self) -> int:
        return self._success_count

    @property
    def empty_count(self) -> int:
        return self._empty_count

    @property
    def error_count(self) -> int:
        return len(self._errors)

    @property
    def handled(self) -> int:
        return self._success_count + self._empty_count + len(self._errors)

    @property
    def rankings(self) -> tuple[RankingRow, ...]:
        return tuple(self._rankings)

    @property
    def errors(self) -> tuple[Error, ...]:
        return tuple(self._errors)

    def handle(self, outcome: JobOutcome) -> None:
        """Consume one outcome.

        Raises:
            RecordWriteError: the durable append failed; nothing was counted.
        """

        job = outcome.request.describe()
        if isinstance(outcome, Success):
            self.sink.append(record_from_success(outcome, run_at=self._clock()))
            self._success_count += 1
            self._rankings.append(RankingRow.from_success(outcome))
            self.metrics.counter("outcomes.success").inc()
            logger.info("job_complete", extra={"job": job, "relative_profit": outcome.relative_profit})
        elif isinstance(outcome, Empty):
            self._empty_count += 1
            self.metrics.counter("outcomes.empty").inc()
            logger.info("job_empty", extra={"job": job, "reason": outcome.reason})
        elif isinstance(outcome, Error):
            self._errors.append(outcome)
            self.metrics.counter("outcomes.error").inc()
            logger.warning("job_error", extra={"job": job, "error_type": outcome.error_type, "cause": outcome.cause})
        else:
            raise TypeError(f"unknown outcome: {outcome!r}")
