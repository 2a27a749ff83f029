from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

# uv/pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from batcher.core.config import Config  # noqa: E402

RSI_TOML = """\
interval = 14

[thresholds]
low = 30
high = 70
persistence = 1
"""

MACD_TOML = """\
short = 10
long = 21
signal = 9

[thresholds]
down = -0.025
up = 0.025
persistence = 1
"""


@pytest.fixture()
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture()
def gekko_path(temp_dir: Path) -> Path:
    """A service install dir with RSI and MACD strategy settings."""

    strategies = temp_dir / "gekko" / "config" / "strategies"
    strategies.mkdir(parents=True)
    (strategies / "RSI.toml").write_text(RSI_TOML, encoding="utf-8")
    (strategies / "MACD.toml").write_text(MACD_TOML, encoding="utf-8")
    return temp_dir / "gekko"


@pytest.fixture()
def test_config(temp_dir: Path, gekko_path: Path) -> Config:
    """Config fixture: small sweep, service dir and results in a temp directory."""

    return Config(
        sweep={
            "candle_sizes": [60, 120],
            "history_sizes": [10],
            "trading_pairs": [["binance", "usdt", "btc"], ["binance", "usdt", "eth"]],
            "methods": ["RSI", "MACD"],
            "daterange": {"from": "2018-01-01 00:00", "to": "2018-02-01 00:00"},
            "parallel_queries": 2,
            "shuffle": False,
        },
        service={"api_url": "http://backtest.test", "gekko_path": gekko_path},
        results={"dir": temp_dir / "results"},
    )


@pytest.fixture(autouse=True)
def _reset_batcher_logger():
    """CLI tests install handlers on the `batcher` logger; drop them afterwards."""

    yield
    logger = logging.getLogger("batcher")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def anyio_backend() -> str:
    """The code under test is built on asyncio; run anyio-marked tests there only."""

    return "asyncio"
