"""The single recompute entry point for a bill's derived fields."""

from __future__ import annotations

from typing import Iterable

from boutique.billing.aggregator import compute_subtotal
from boutique.billing.pricing import apply_pricing
from boutique.billing.settlement import settle
from boutique.schemas.billing import BillInputs, BillTotals, CostBreakdown, DiscountSpec, LineItem


def derive_invoice(
    items: Iterable[LineItem],
    breakdown: CostBreakdown,
    tax_percent: float,
    discount: DiscountSpec,
    paid_amount: float,
) -> BillTotals:
    """Recompute subtotal, tax, discount, total, balance and status together.

    Raises ``InvalidAmount`` before producing anything if any input is
    negative, so a failed edit never yields partially updated totals.
    """
    subtotal = compute_subtotal(list(items), breakdown)
    pricing = apply_pricing(subtotal, tax_percent, discount)
    settlement = settle(pricing.total_amount, paid_amount)

    warnings = [str(settlement.warning)] if settlement.warning is not None else []
    return BillTotals(
        subtotal=subtotal,
        tax_amount=pricing.tax_amount,
        discount_amount=pricing.discount_amount,
        total_amount=pricing.total_amount,
        balance=settlement.balance,
        status=settlement.status,
        warnings=warnings,
    )


def derive_from_inputs(inputs: BillInputs) -> BillTotals:
    return derive_invoice(
        inputs.items,
        inputs.breakdown,
        inputs.tax_percent,
        inputs.discount,
        inputs.paid_amount,
    )
