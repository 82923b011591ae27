"""Sums billable item rows and the fixed cost breakdown into a subtotal."""

from __future__ import annotations

import math
from typing import Iterable, List

from boutique.billing.money import require_non_negative, round2
from boutique.schemas.billing import CostBreakdown, LineItem

BREAKDOWN_FIELDS = ("fabric", "stitching", "accessories", "customization", "other")


def line_amount(quantity: int, rate: float) -> float:
    quantity = require_non_negative("quantity", quantity)
    rate = require_non_negative("rate", rate)
    return round2(quantity * rate)


def items_total(items: Iterable[LineItem]) -> float:
    # math.fsum keeps the sum independent of item ordering
    amounts = [line_amount(item.quantity, item.rate) for item in items]
    return round2(math.fsum(amounts))


def breakdown_total(breakdown: CostBreakdown) -> float:
    values = [
        require_non_negative(f"breakdown.{name}", getattr(breakdown, name))
        for name in BREAKDOWN_FIELDS
    ]
    return round2(math.fsum(values))


def compute_subtotal(items: Iterable[LineItem], breakdown: CostBreakdown) -> float:
    return round2(items_total(items) + breakdown_total(breakdown))


def drop_blank_items(items: Iterable[LineItem]) -> List[LineItem]:
    """Return the rows worth persisting: those with a non-blank description."""
    return [item for item in items if item.description and item.description.strip()]
