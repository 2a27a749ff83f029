"""batcher.core.time

The only time helper surface in the codebase.

Display formats follow what operators read in the CSV:
- date: ``Jan 5, 2018``
- time: ``3:07 PM``
- datetime: ``Jan 5, 2018 3:07 PM``
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

# epoch values above this are milliseconds
_EPOCH_MS_THRESHOLD = 10**11


def utc_now() -> datetime:
    """Return an aware UTC datetime."""

    return datetime.now(tz=UTC)


def parse_dt(value: str) -> datetime:
    """Parse an ISO-8601 datetime string into an aware UTC datetime.

    Accepts:
    - `Z` suffix
    - explicit offsets
    - a space instead of `T`
    - naive timestamps (assumed UTC)

    Raises:
        ValueError: if parsing fails.
    """

    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"

    dt = datetime.fromisoformat(v)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_date(dt: datetime) -> str:
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_time(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    return f"{hour}:{dt:%M} {dt:%p}"


def humanize_date(value: Any) -> str:
    """Render a service timestamp as ``Jan 5, 2018 3:07 PM`` (UTC).

    The service reports times as ISO strings or epoch numbers. Anything that
    does not parse is returned as text, unchanged.
    """

    if value is None or value == "":
        return ""

    dt: datetime
    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=UTC)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000 if abs(value) >= _EPOCH_MS_THRESHOLD else value
        dt = datetime.fromtimestamp(seconds, tz=UTC)
    else:
        try:
            dt = parse_dt(str(value))
        except ValueError:
            return str(value)

    dt = dt.astimezone(UTC)
    return f"{format_date(dt)} {format_time(dt)}"
