"""
Monetary value helpers (``hr_kernel.domain.values``).

Entity-store records arrive as JSON, so salaries may be ``int``, ``float``,
``str`` or missing.  Everything is normalised to ``Decimal`` through
``str()`` before any arithmetic; floats never enter a calculation.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal | None:
    """Convert an entity-store number to ``Decimal``; ``None``/blank stays ``None``.

    Raises:
        ValueError: if ``value`` is not a number representation.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert boolean {value!r} to Decimal")
    text = str(value).strip()
    if not text:
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Cannot convert {value!r} to Decimal") from None


def round_money(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
