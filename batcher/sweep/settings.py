"""batcher.sweep.settings

Per-method strategy settings, read from the service's own TOML files
(``<gekko_path>/config/strategies/<method>.toml``).

A method without readable settings cannot be backtested, so every failure
here is a configuration error raised before any job is submitted.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from batcher.core.exceptions import StrategySettingsError

logger = logging.getLogger(__name__)


class StrategySettingsLoader:
    def __init__(self, strategies_dir: str | Path) -> None:
        self.strategies_dir = Path(strategies_dir)
        self._cache: dict[str, dict[str, Any]] = {}

    def path_for(self, method: str) -> Path:
        return self.strategies_dir / f"{method}.toml"

    def load(self, method: str) -> dict[str, Any]:
        """Return the settings for `method`; the file is read once."""

        if method in self._cache:
            return self._cache[method]

        path = self.path_for(method)
        try:
            with path.open("rb") as f:
                settings = tomllib.load(f)
        except FileNotFoundError as e:
            raise StrategySettingsError(f"Strategy settings not found for {method}: {path}") from e
        except OSError as e:
            raise StrategySettingsError(f"Strategy settings unreadable for {method}: {path} ({e})") from e
        except tomllib.TOMLDecodeError as e:
            raise StrategySettingsError(f"Strategy settings invalid for {method}: {path} ({e})") from e

        logger.debug("strategy_settings_loaded", extra={"method": method, "path": str(path)})
        self._cache[method] = settings
        return settings
