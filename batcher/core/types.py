"""batcher.core.types

Lightweight dataclasses for the sweep hot path.

Pydantic models own the config boundary; dataclasses keep jobs and outcomes
lean and immutable.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar


@dataclass(frozen=True, slots=True)
class TradingPair:
    exchange: str
    currency: str
    asset: str

    @property
    def label(self) -> str:
        return f"{self.currency}/{self.asset}".upper()


@dataclass(frozen=True, slots=True)
class DateRange:
    from_: str
    to: str


@dataclass(frozen=True, slots=True)
class ParameterCombination:
    candle_size: int
    history_size: int
    trading_pair: TradingPair
    method: str
    # method name -> that method's settings; read-only view
    strategy_settings: Mapping[str, Mapping[str, Any]]

    @property
    def settings(self) -> Mapping[str, Any]:
        return self.strategy_settings[self.method]


@dataclass(frozen=True, slots=True)
class JobRequest:
    combination: ParameterCombination
    daterange: DateRange
    body: dict[str, Any] = field(repr=False, compare=False)

    def payload(self) -> dict[str, Any]:
        """A private copy of the service request body."""
        return copy.deepcopy(self.body)

    def describe(self) -> str:
        c = self.combination
        exchange = c.trading_pair.exchange
        return f"{c.method} {c.trading_pair.label} {c.candle_size}/{c.history_size} {exchange[:1].upper()}{exchange[1:]}"


class OutcomeKind(StrEnum):
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Success:
    kind: ClassVar[OutcomeKind] = OutcomeKind.SUCCESS

    request: JobRequest
    method: str
    exchange: str
    currency: str
    asset: str
    candle_size: int
    history_size: int
    profit: float | None
    relative_profit: float | None
    market_performance: float | None
    yearly_profit: float | None
    relative_yearly_profit: float | None
    sharpe: float | None
    alpha: float | None
    downside: float | None
    trades: int | None
    start_balance: float | None
    start_price: float | None
    end_price: float | None
    start_time: Any
    end_time: Any
    timespan: str | None
    strategy_parameters: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Empty:
    kind: ClassVar[OutcomeKind] = OutcomeKind.EMPTY

    request: JobRequest
    reason: str  # "no_trading_advisor" | "no_performance_report"


@dataclass(frozen=True, slots=True)
class Error:
    kind: ClassVar[OutcomeKind] = OutcomeKind.ERROR

    request: JobRequest
    error_type: str
    cause: str


JobOutcome = Success | Empty | Error


@dataclass(frozen=True, slots=True)
class RankingRow:
    method: str
    currency: str
    asset: str
    candle_size: int
    history_size: int
    exchange: str
    relative_profit: float | None
    market_performance: float | None

    @classmethod
    def from_success(cls, s: Success) -> RankingRow:
        return cls(
            method=s.method,
            currency=s.currency,
            asset=s.asset,
            candle_size=s.candle_size,
            history_size=s.history_size,
            exchange=s.exchange,
            relative_profit=s.relative_profit,
            market_performance=s.market_performance,
        )
