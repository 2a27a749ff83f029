"""batcher.sweep.classifier

Turn one raw service result into exactly one outcome.

    exception                                   -> Error
    no tradingAdvisor or no performanceReport   -> Empty
    otherwise                                   -> Success (rounded)

Pure: the same input always yields an equal outcome. Nothing is logged here;
the aggregator decides what operators see.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from batcher.core.numbers import PERCENT_PLACES, RATIO_PLACES, round_to
from batcher.core.types import Empty, Error, JobOutcome, JobRequest, Success


def is_empty(value: Any) -> bool:
    """True for None and for empty strings or containers."""

    if value is None:
        return True
    if isinstance(value, (str, bytes, Mapping, list, tuple, set)):
        return len(value) == 0
    return False


def _num(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def _success(request: JobRequest, raw: Mapping[str, Any]) -> Success:
    advisor = raw["tradingAdvisor"]
    report = raw["performanceReport"]
    if not isinstance(advisor, Mapping) or not isinstance(report, Mapping):
        raise TypeError("tradingAdvisor and performanceReport must be objects")

    pair = request.combination.trading_pair
    market = raw.get("market")
    if not isinstance(market, Mapping) or is_empty(market):
        market = {"exchange": pair.exchange, "currency": pair.currency, "asset": pair.asset}

    params = raw.get("strategyParameters")
    return Success(
        request=request,
        method=str(advisor.get("method") or request.combination.method),
        exchange=str(market.get("exchange") or pair.exchange),
        currency=str(market.get("currency") or pair.currency).upper(),
        asset=str(market.get("asset") or pair.asset).upper(),
        candle_size=int(advisor.get("candleSize", request.combination.candle_size)),
        history_size=int(advisor.get("historySize", request.combination.history_size)),
        profit=round_to(report.get("profit"), PERCENT_PLACES),
        relative_profit=round_to(report.get("relativeProfit"), PERCENT_PLACES),
        market_performance=round_to(report.get("market"), PERCENT_PLACES),
        yearly_profit=round_to(report.get("yearlyProfit"), PERCENT_PLACES),
        relative_yearly_profit=round_to(report.get("relativeYearlyProfit"), PERCENT_PLACES),
        sharpe=round_to(report.get("sharpe"), RATIO_PLACES),
        alpha=round_to(report.get("alpha"), RATIO_PLACES),
        downside=round_to(report.get("downside"), RATIO_PLACES),
        trades=_int(report.get("trades")),
        start_balance=_num(report.get("startBalance")),
        start_price=_num(report.get("startPrice")),
        end_price=_num(report.get("endPrice")),
        start_time=report.get("startTime"),
        end_time=report.get("endTime"),
        timespan=None if report.get("timespan") is None else str(report.get("timespan")),
        strategy_parameters=dict(params) if isinstance(params, Mapping) else {},
    )


def classify(request: JobRequest, raw: Mapping[str, Any] | BaseException) -> JobOutcome:
    if isinstance(raw, BaseException):
        return Error(request=request, error_type=type(raw).__name__, cause=str(raw) or repr(raw))

    if is_empty(raw.get("tradingAdvisor")):
        return Empty(request=request, reason="no_trading_advisor")
    if is_empty(raw.get("performanceReport")):
        return Empty(request=request, reason="no_performance_report")

    try:
        return _success(request, raw)
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        # service answered with a report we cannot read
        return Error(request=request, error_type="ServiceError", cause=f"malformed_report: {e}")
