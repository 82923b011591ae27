"""Balance and payment status from a bill total and the amount paid so far."""

from __future__ import annotations

import logging
from typing import NamedTuple, Optional

from boutique.billing.money import require_non_negative, round2
from boutique.schemas.billing import BillStatus
from boutique.services.exceptions import OverpaymentWarning

logger = logging.getLogger(__name__)


class Settlement(NamedTuple):
    balance: float
    status: BillStatus
    warning: Optional[OverpaymentWarning] = None


def payment_status(total_amount: float, paid_amount: float) -> BillStatus:
    if paid_amount >= total_amount:
        return BillStatus.PAID
    if paid_amount > 0:
        return BillStatus.PARTIAL
    return BillStatus.UNPAID


def settle(total_amount: float, paid_amount: float) -> Settlement:
    """Fold ``paid_amount`` into ``total_amount``.

    The balance is not clamped: overpayment yields a negative balance and an
    :class:`OverpaymentWarning` on the result instead of an exception.
    """
    total_amount = round2(require_non_negative("total_amount", total_amount))
    paid_amount = round2(require_non_negative("paid_amount", paid_amount))

    warning: Optional[OverpaymentWarning] = None
    if paid_amount > total_amount:
        warning = OverpaymentWarning(total_amount, paid_amount)
        logger.warning("%s", warning)

    return Settlement(
        balance=round2(total_amount - paid_amount),
        status=payment_status(total_amount, paid_amount),
        warning=warning,
    )
