"""batcher.core

Core primitives.

Sweep modules depend on this package; it depends on nothing inside batcher.
"""

from .config import Config
from .exceptions import BatcherError, ConfigError, RecordWriteError, ServiceError, StrategySettingsError
from .time import humanize_date, utc_now

__all__ = [
    "BatcherError",
    "Config",
    "ConfigError",
    "RecordWriteError",
    "ServiceError",
    "StrategySettingsError",
    "humanize_date",
    "utc_now",
]
