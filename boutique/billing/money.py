"""Currency arithmetic shared by every billing computation."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from boutique.services.exceptions import InvalidAmount

_CENTS = Decimal("0.01")


def round2(value: float) -> float:
    """Round half-up to two decimals.

    Goes through ``Decimal(str(value))`` so that 2.675 rounds to 2.68 rather
    than to the binary-float neighbour 2.67.
    """
    rounded = float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))
    # normalise -0.0
    return rounded + 0.0


def require_non_negative(field: str, value: float | int | None) -> float:
    if value is None:
        raise InvalidAmount(field, value)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidAmount(field, value) from exc
    if not math.isfinite(number) or number < 0:
        raise InvalidAmount(field, value)
    return number


def format_amount(value: float) -> str:
    """Fixed two-decimal string without a currency symbol (``"1080.00"``)."""
    return f"{round2(value):.2f}"


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(value: float, symbol: str = "₹") -> str:
    """Display format with Indian digit grouping, e.g. ``₹1,23,456.00``."""
    amount = round2(value)
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):.2f}".partition(".")
    return f"{sign}{symbol}{_group_indian(whole)}.{fraction}"
