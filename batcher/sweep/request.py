"""batcher.sweep.request

Build the service request body for one combination.

Fees, slippage and the starting balance are fixed for every job in a sweep:
they are not dimensions, so they live here and nowhere else.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import Any

from batcher.core.types import DateRange, JobRequest, ParameterCombination

PAPER_TRADER: dict[str, Any] = {
    "feeMaker": 0.25,
    "feeTaker": 0.25,
    "feeUsing": "maker",
    "slippage": 0.05,
    "simulationBalance": {"asset": 1, "currency": 100},
    "reportRoundtrips": True,
    "enabled": True,
}

RESULT_EXPORTER: dict[str, Any] = {
    "enabled": True,
    "writeToDisk": False,
    "data": {
        "stratUpdates": False,
        "roundtrips": False,
        "stratCandles": False,
        "stratCandleProps": ["open"],
        "trades": False,
    },
}

PERFORMANCE_ANALYZER: dict[str, Any] = {
    "riskFreeReturn": 2,
    "enabled": True,
}


def build_request(combination: ParameterCombination, daterange: DateRange) -> JobRequest:
    pair = combination.trading_pair
    body: dict[str, Any] = {
        "watch": {
            "exchange": pair.exchange,
            "currency": pair.currency,
            "asset": pair.asset,
        },
        "paperTrader": copy.deepcopy(PAPER_TRADER),
        "tradingAdvisor": {
            "enabled": True,
            "method": combination.method,
            "candleSize": combination.candle_size,
            "historySize": combination.history_size,
        },
        "backtest": {
            "daterange": {
                "from": daterange.from_,
                "to": daterange.to,
            }
        },
        "backtestResultExporter": copy.deepcopy(RESULT_EXPORTER),
        "performanceAnalyzer": copy.deepcopy(PERFORMANCE_ANALYZER),
        "valid": True,
    }
    body[combination.method] = copy.deepcopy(dict(combination.settings))
    return JobRequest(combination=combination, daterange=daterange, body=body)


def build_requests(combinations: Iterable[ParameterCombination], daterange: DateRange) -> list[JobRequest]:
    return [build_request(c, daterange) for c in combinations]
