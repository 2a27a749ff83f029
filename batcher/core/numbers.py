"""batcher.core.numbers

Display rounding.

Half-up on the decimal representation, so 0.125 -> 0.13 the way a person
rounding by hand would expect (binary floats alone give 0.12).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

PERCENT_PLACES = 2
RATIO_PLACES = 3


def round_to(value: Any, places: int = PERCENT_PLACES) -> float | None:
    """Round a numeric service value for display.

    Returns None for missing values. Non-finite floats pass through.
    """

    if value is None or value == "":
        return None
    try:
        d = Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"not a number: {value!r}") from e
    if not d.is_finite():
        return float(d)
    try:
        return float(d.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # beyond decimal context precision; already coarser than `places`
        return float(d)
