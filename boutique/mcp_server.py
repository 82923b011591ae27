# boutique/mcp_server.py
from __future__ import annotations

import logging
from typing import List, Optional

from mcp.server.fastmcp import FastMCP, Context
from pydantic import BaseModel, Field

from boutique.billing.aggregator import drop_blank_items
from boutique.billing.derive import derive_invoice
from boutique.billing.payment_link import build_payment_request
from boutique.config import get_settings
from boutique.schemas.billing import (
    BillTotals,
    CostBreakdown,
    DiscountSpec,
    LineItem,
    PaymentRequest,
)

log = logging.getLogger("boutique.mcp")

mcp = FastMCP("boutique_billing")

# --------------------------
# Tool I/O models
# --------------------------
class BillPreviewInput(BaseModel):
    items: List[LineItem] = Field(default_factory=list)
    breakdown: CostBreakdown = Field(default_factory=CostBreakdown)
    tax_percent: float = Field(0.0, description="GST percentage, e.g. 18")
    discount: DiscountSpec = Field(default_factory=DiscountSpec)
    paid_amount: float = 0.0

class PaymentLinkInput(BaseModel):
    amount: float = Field(..., description="Amount to request, e.g. 1080")
    note: str = Field(..., description="Transaction note, e.g. 'Bill BILL1007'")
    payee_handle: Optional[str] = Field(None, description="UPI id, e.g. 'shop@paytm'")
    payee_display_name: Optional[str] = None

# --------------------------
# Tools
# --------------------------
@mcp.tool(name="bill_preview", description="Compute bill totals, balance and status")
async def bill_preview(input: BillPreviewInput, ctx: Context) -> BillTotals:
    log.debug("bill_preview input=%s", input.model_dump())
    out = derive_invoice(
        drop_blank_items(input.items),
        input.breakdown,
        input.tax_percent,
        input.discount,
        input.paid_amount,
    )
    log.debug("bill_preview output=%s", out.model_dump())
    return out

@mcp.tool(name="payment_link", description="Build a UPI payment link and QR code")
async def payment_link(input: PaymentLinkInput, ctx: Context) -> PaymentRequest:
    settings = get_settings()
    log.debug("payment_link input=%s", input.model_dump())
    out = build_payment_request(
        input.payee_handle or settings.payee_handle,
        input.payee_display_name or settings.payee_display_name,
        input.amount,
        input.note,
        currency=settings.currency,
        box_size=settings.qr_box_size,
        border=settings.qr_border,
    )
    log.debug("payment_link output link=%s", out.upi_link)
    return out

@mcp.tool(name="ping", description="Health check")
async def ping(message: str) -> str:
    log.debug("ping %s", message)
    return f"pong: {message}"
