"""batcher: bounded-concurrency backtest sweeps.

Expand a parameter grid, push every point through a remote backtest service,
keep what worked.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "1.0.0"
