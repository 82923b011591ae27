from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field

from boutique.billing.money import round2


class BillStatus(str, Enum):
    PAID = "paid"
    PARTIAL = "partial"
    UNPAID = "unpaid"


class DiscountKind(str, Enum):
    AMOUNT = "amount"
    PERCENTAGE = "percentage"


class LineItem(BaseModel):
    item_id: str = Field(default_factory=lambda: uuid4().hex)
    description: str = ""
    quantity: int = 1
    rate: float = 0.0
    charge_type: Optional[str] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount(self) -> float:
        return round2(self.quantity * self.rate)


class CostBreakdown(BaseModel):
    """The five fixed charge categories billed outside the item rows."""

    fabric: float = 0.0
    stitching: float = 0.0
    accessories: float = 0.0
    customization: float = 0.0
    other: float = 0.0


class DiscountSpec(BaseModel):
    value: float = 0.0
    kind: DiscountKind = DiscountKind.AMOUNT


class BankDetails(BaseModel):
    account_name: str = ""
    account_number: str = ""
    ifsc: str = ""
    bank_name: str = ""


class BillInputs(BaseModel):
    customer_id: Optional[str] = None
    customer_name: str
    customer_phone: str = ""
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    order_id: Optional[str] = None
    items: List[LineItem] = Field(default_factory=list)
    breakdown: CostBreakdown = Field(default_factory=CostBreakdown)
    tax_percent: float = 0.0
    discount: DiscountSpec = Field(default_factory=DiscountSpec)
    paid_amount: float = 0.0
    payee_handle: Optional[str] = None
    payee_display_name: Optional[str] = None
    bank_details: Optional[BankDetails] = None
    qr_amount: Optional[float] = None  # operator override, defaults to balance
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    extras: Dict[str, str] = Field(default_factory=dict)


class BillTotals(BaseModel):
    subtotal: float
    tax_amount: float
    discount_amount: float
    total_amount: float
    balance: float
    status: BillStatus
    warnings: List[str] = Field(default_factory=list)


class PaymentRequest(BaseModel):
    payee_handle: str
    payee_display_name: str
    amount: float
    note: str
    upi_link: str
    qr_code: Optional[str] = None  # data:image/png;base64,...


class Bill(BillInputs, BillTotals):
    id: str
    bill_id: str
    sequence: int
    date: datetime
    upi_link: Optional[str] = None
    qr_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class BillUpdateRequest(BaseModel):
    id: str
    inputs: BillInputs


class BillPaymentRecord(BaseModel):
    id: str
    amount: float


class PaymentLinkRequest(BaseModel):
    id: Optional[str] = None
    payee_handle: Optional[str] = None
    payee_display_name: Optional[str] = None
    amount: Optional[float] = None
    note: Optional[str] = None


class BillLookupRequest(BaseModel):
    id: str


class BillListRequest(BaseModel):
    status: Optional[BillStatus] = None
    search: Optional[str] = None
    date_range: Literal["all", "today", "week", "month"] = "all"


class BillSummary(BaseModel):
    id: str
    bill_id: str
    customer_name: str
    customer_phone: str = ""
    total_amount: float
    paid_amount: float
    balance: float
    status: BillStatus
    date: datetime


class BillListResponse(BaseModel):
    total: int
    items: List[BillSummary]


class BillStats(BaseModel):
    total_bills: int
    total_revenue: float
    pending_amount: float
    paid_bills: int
