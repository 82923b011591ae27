"""Tax and discount rules applied on top of the subtotal."""

from __future__ import annotations

from typing import NamedTuple

from boutique.billing.money import require_non_negative, round2
from boutique.schemas.billing import DiscountKind, DiscountSpec


class Pricing(NamedTuple):
    tax_amount: float
    discount_amount: float
    total_amount: float


def compute_tax(subtotal: float, tax_percent: float) -> float:
    tax_percent = require_non_negative("tax_percent", tax_percent)
    if tax_percent == 0:
        return 0.0
    return round2(subtotal * tax_percent / 100)


def compute_discount(subtotal: float, discount: DiscountSpec) -> float:
    """Discount amount for ``discount``.

    Percentages are not clamped to 100: an oversized discount is allowed and
    simply floors the total at zero in :func:`compute_total`.
    """
    value = require_non_negative("discount.value", discount.value)
    if discount.kind == DiscountKind.PERCENTAGE:
        if value == 0:
            return 0.0
        return round2(subtotal * value / 100)
    return round2(value)


def compute_total(subtotal: float, tax_amount: float, discount_amount: float) -> float:
    return round2(max(0.0, subtotal + tax_amount - discount_amount))


def apply_pricing(subtotal: float, tax_percent: float, discount: DiscountSpec) -> Pricing:
    subtotal = round2(require_non_negative("subtotal", subtotal))
    tax_amount = compute_tax(subtotal, tax_percent)
    discount_amount = compute_discount(subtotal, discount)
    return Pricing(
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        total_amount=compute_total(subtotal, tax_amount, discount_amount),
    )
