"""batcher.sweep.space

Parameter space expansion.

The sweep is the cartesian product of four dimensions, nested in this order:

    candle size > history size > trading pair > method

so the method varies fastest. With ``shuffle`` the finished list is permuted
once (a uniform shuffle of whole combinations, not of each dimension).
"""

from __future__ import annotations

import copy
import itertools
import math
import random
from collections.abc import Sequence
from types import MappingProxyType
from typing import Any, Protocol

from batcher.core.types import ParameterCombination, TradingPair


class SettingsSource(Protocol):
    def load(self, method: str) -> dict[str, Any]: ...


def space_size(*dimensions: Sequence[Any]) -> int:
    """Number of combinations the dimensions expand to."""
    return math.prod(len(d) for d in dimensions)


def expand_space(
    candle_sizes: Sequence[int],
    history_sizes: Sequence[int],
    trading_pairs: Sequence[TradingPair],
    methods: Sequence[str],
    *,
    loader: SettingsSource,
    shuffle: bool = False,
    rng: random.Random | None = None,
) -> list[ParameterCombination]:
    """Expand the sweep dimensions into one combination per job.

    Strategy settings are loaded for every distinct method before anything is
    built, so a missing settings file fails the whole expansion.

    Raises:
        StrategySettingsError: from the loader.
    """

    settings: dict[str, MappingProxyType] = {}
    for method in methods:
        if method not in settings:
            settings[method] = MappingProxyType({method: copy.deepcopy(loader.load(method))})

    out = [
        ParameterCombination(
            candle_size=int(candle_size),
            history_size=int(history_size),
            trading_pair=pair,
            method=method,
            strategy_settings=settings[method],
        )
        for candle_size, history_size, pair, method in itertools.product(
            candle_sizes, history_sizes, trading_pairs, methods
        )
    ]

    if shuffle:
        (rng or random.Random()).shuffle(out)
    return out
