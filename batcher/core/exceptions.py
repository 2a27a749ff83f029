"""batcher.core.exceptions

Errors are part of the interface.

Only configuration errors end a sweep. Everything else is scoped to one job.
"""

from __future__ import annotations


class BatcherError(Exception):
    """Base exception for batcher."""


class ConfigError(BatcherError):
    """Configuration is missing, invalid, or inconsistent."""


class StrategySettingsError(ConfigError):
    """A method's strategy settings file is missing or unreadable."""


class ServiceError(BatcherError):
    """The backtest service answered, but not with something usable."""


class RecordWriteError(BatcherError):
    """A result could not be appended to the durable record."""
