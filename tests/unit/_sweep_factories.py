from __future__ import annotations

from types import MappingProxyType
from typing import Any

from batcher.core.types import DateRange, JobRequest, ParameterCombination, TradingPair
from batcher.sweep.request import build_request

DATERANGE = DateRange(from_="2018-01-01 00:00", to="2018-02-01 00:00")


def make_combination(
    *,
    method: str = "RSI",
    candle_size: int = 60,
    history_size: int = 10,
    exchange: str = "binance",
    currency: str = "usdt",
    asset: str = "btc",
    settings: dict[str, Any] | None = None,
) -> ParameterCombination:
    return ParameterCombination(
        candle_size=candle_size,
        history_size=history_size,
        trading_pair=TradingPair(exchange=exchange, currency=currency, asset=asset),
        method=method,
        strategy_settings=MappingProxyType({method: settings if settings is not None else {"interval": 14}}),
    )


def make_request(**kwargs: Any) -> JobRequest:
    return build_request(make_combination(**kwargs), DATERANGE)


def service_report(
    *,
    method: str = "RSI",
    candle_size: int = 60,
    history_size: int = 10,
    currency: str = "usdt",
    asset: str = "btc",
    relative_profit: float = 12.3456,
    market: float = -4.321,
) -> dict[str, Any]:
    """A service response with trades, shaped like the real /api/backtest body."""

    return {
        "market": {"exchange": "binance", "currency": currency, "asset": asset},
        "tradingAdvisor": {"method": method, "candleSize": candle_size, "historySize": history_size},
        "strategyParameters": {"interval": 14, "thresholds": {"low": 30, "high": 70}},
        "performanceReport": {
            "profit": 12.34567,
            "relativeProfit": relative_profit,
            "market": market,
            "yearlyProfit": 150.125,
            "relativeYearlyProfit": 148.0049,
            "sharpe": 1.23456,
            "alpha": 0.98765,
            "downside": -0.4444,
            "trades": 42,
            "startBalance": 1100.5,
            "startPrice": 1000,
            "endPrice": 1100.5,
            "startTime": "2018-01-01T00:00:00Z",
            "endTime": "2018-02-01T00:00:00Z",
            "timespan": "a month",
        },
    }
