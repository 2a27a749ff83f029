"""batcher.core.logging

Logging is configured once, at the entry point. Modules only ever call
``logging.getLogger(__name__)``.

Messages are short snake_case event names; context travels in ``extra=``.
Plain output appends the context as ``key=value`` pairs, JSON output emits one
object per line.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, TextIO

from batcher.core.config import LoggingConfig

# attributes every LogRecord carries; anything else came in via `extra=`
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}


class KeyValueFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        fields = _extra_fields(record)
        if not fields:
            return base
        kv = " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
        return f"{base} {kv}"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update(_extra_fields(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)


def setup_logging(cfg: LoggingConfig | None = None, *, stream: TextIO | None = None) -> logging.Logger:
    """Install a single handler on the ``batcher`` logger.

    Safe to call more than once; the previous handler is replaced.
    """

    cfg = cfg or LoggingConfig()
    logger = logging.getLogger("batcher")
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter() if cfg.json_output else KeyValueFormatter())
    logger.addHandler(handler)
    logger.setLevel(cfg.level.upper())
    return logger
