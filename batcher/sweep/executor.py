"""batcher.sweep.executor

Bounded-concurrency job execution.

One dispatch loop walks the job list in order and takes a semaphore slot
before starting each job, so:
- at most `limit` jobs are in flight at any time
- jobs are admitted strictly in input order (FIFO)
- a slot frees only when a job has fully resolved

Completion order is whatever the service gives us.

Every job resolves to exactly one outcome. Failures stay inside their job:
a transport error becomes an Error outcome, and a failure while handling an
outcome (e.g. the durable write) is reported once to the sweep's
ErrorBoundary. Nothing is retried, nothing is cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from batcher.core.metrics import MetricsRegistry
from batcher.core.types import JobOutcome, JobRequest
from batcher.sweep.classifier import classify

logger = logging.getLogger(__name__)

RunJob = Callable[[JobRequest], Awaitable[Mapping[str, Any]]]
OnOutcome = Callable[[JobOutcome], None]
Classify = Callable[[JobRequest, Any], JobOutcome]


@dataclass(frozen=True, slots=True)
class JobFailure:
    request: JobRequest
    error_type: str
    message: str


class ErrorBoundary:
    """The single error channel for a sweep.

    Set up once per sweep and shared by every job; a job whose outcome could
    not be processed reports here instead of raising.
    """

    def __init__(self) -> None:
        self._failures: list[JobFailure] = []

    @property
    def failures(self) -> tuple[JobFailure, ...]:
        return tuple(self._failures)

    def report(self, request: JobRequest, exc: BaseException) -> None:
        failure = JobFailure(request=request, error_type=type(exc).__name__, message=str(exc))
        self._failures.append(failure)
        logger.error(
            "job_unprocessed",
            extra={"job": request.describe(), "error_type": failure.error_type, "cause": failure.message},
        )


@dataclass(frozen=True, slots=True)
class ExecutionSummary:
    submitted: int
    resolved: int
    unprocessed: int
    peak_in_flight: int


class BoundedExecutor:
    def __init__(
        self,
        run_job: RunJob,
        *,
        limit: int,
        on_outcome: OnOutcome,
        classify: Classify = classify,
        errors: ErrorBoundary | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        if int(limit) < 1:
            raise ValueError(f"concurrency limit must be >= 1, got {limit}")
        self.limit = int(limit)
        self._run_job = run_job
        self._on_outcome = on_outcome
        self._classify = classify
        self.errors = errors or ErrorBoundary()
        self.metrics = metrics or MetricsRegistry()
        self._in_flight = 0
        self._peak = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    async def run(self, requests: Iterable[JobRequest]) -> ExecutionSummary:
        """Run every job; return once all of them have resolved."""

        sem = asyncio.Semaphore(self.limit)
        unprocessed_before = len(self.errors.failures)
        tasks: list[asyncio.Task[None]] = []

        for request in requests:
            await sem.acquire()
            tasks.append(asyncio.create_task(self._run_one(request, sem)))

        if tasks:
            await asyncio.gather(*tasks)

        return ExecutionSummary(
            submitted=len(tasks),
            resolved=len(tasks),
            unprocessed=len(self.errors.failures) - unprocessed_before,
            peak_in_flight=self._peak,
        )

    async def _run_one(self, request: JobRequest, sem: asyncio.Semaphore) -> None:
        self._in_flight += 1
        self._peak = max(self._peak, self._in_flight)
        self.metrics.counter("jobs.admitted").inc()
        self.metrics.gauge("jobs.in_flight").set(self._in_flight)
        self.metrics.gauge("jobs.in_flight_peak").set_max(self._in_flight)
        logger.info("job_started", extra={"job": request.describe()})

        try:
            raw: Any
            try:
                raw = await self._run_job(request)
            except Exception as e:  # noqa: BLE001 - per-job isolation boundary
                raw = e

            try:
                self._on_outcome(self._classify(request, raw))
            except Exception as e:  # noqa: BLE001 - per-job isolation boundary
                self.errors.report(request, e)
        finally:
            self._in_flight -= 1
            self.metrics.gauge("jobs.in_flight").set(self._in_flight)
            self.metrics.counter("jobs.resolved").inc()
            sem.release()
