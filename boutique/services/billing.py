from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from boutique.billing.aggregator import drop_blank_items
from boutique.billing.derive import derive_invoice
from boutique.billing.identity import format_bill_id
from boutique.billing.money import require_non_negative, round2
from boutique.billing.payment_link import (
    build_payment_request,
    default_note,
    refresh_payment_request,
)
from boutique.clients.store import DocumentStoreClient
from boutique.config import Settings, get_settings
from boutique.schemas.billing import (
    BankDetails,
    Bill,
    BillInputs,
    BillListRequest,
    BillListResponse,
    BillPaymentRecord,
    BillStats,
    BillStatus,
    BillSummary,
    BillTotals,
    BillUpdateRequest,
    PaymentLinkRequest,
    PaymentRequest,
)
from boutique.services.exceptions import (
    BillNotFoundError,
    NothingOwedError,
    ServiceError,
)
from boutique.services.mock_store import BillRepository, get_mock_store

logger = logging.getLogger(__name__)

_DATE_RANGE_DAYS = {"today": 0, "week": 7, "month": 30}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BillingService:
    def __init__(
        self,
        client: DocumentStoreClient,
        *,
        settings: Settings | None = None,
        repository: BillRepository | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or get_settings()
        self._repository = repository
        if self._client.use_mock_data:
            self._repository = repository or get_mock_store().bills

    # --- derivation -------------------------------------------------------

    def preview(self, inputs: BillInputs) -> BillTotals:
        """Derived totals for a draft that has not been persisted yet."""
        return derive_invoice(
            drop_blank_items(inputs.items),
            inputs.breakdown,
            inputs.tax_percent,
            inputs.discount,
            inputs.paid_amount,
        )

    def _payee(self, inputs: BillInputs) -> tuple[str, str]:
        handle = inputs.payee_handle or self._settings.payee_handle
        name = inputs.payee_display_name or self._settings.payee_display_name
        return handle, name

    def _default_bank_details(self) -> BankDetails:
        return BankDetails(
            account_name=self._settings.bank_account_name,
            account_number=self._settings.bank_account_number,
            ifsc=self._settings.bank_ifsc,
            bank_name=self._settings.bank_name,
        )

    def _assemble(
        self,
        inputs: BillInputs,
        *,
        record_id: str,
        sequence: int,
        date: datetime,
        created_at: datetime,
        previous: Optional[Bill] = None,
    ) -> Bill:
        items = drop_blank_items(inputs.items)
        totals = derive_invoice(
            items,
            inputs.breakdown,
            inputs.tax_percent,
            inputs.discount,
            inputs.paid_amount,
        )
        bill_id = format_bill_id(
            sequence,
            prefix=self._settings.bill_id_prefix,
            offset=self._settings.bill_id_offset,
        )

        if inputs.qr_amount is not None:
            qr_amount = round2(require_non_negative("qr_amount", inputs.qr_amount))
        else:
            qr_amount = totals.balance

        warnings = list(totals.warnings)
        upi_link: Optional[str] = None
        qr_code: Optional[str] = None
        if qr_amount > 0:
            handle, name = self._payee(inputs)
            previous_request = None
            if previous is not None and previous.upi_link:
                previous_request = PaymentRequest(
                    payee_handle=handle,
                    payee_display_name=name,
                    amount=qr_amount,
                    note=default_note(bill_id),
                    upi_link=previous.upi_link,
                    qr_code=previous.qr_code,
                )
            request, error = refresh_payment_request(
                previous_request,
                handle,
                name,
                qr_amount,
                default_note(bill_id),
                currency=self._settings.currency,
                box_size=self._settings.qr_box_size,
                border=self._settings.qr_border,
            )
            if error is not None:
                warnings.append(f"Payment QR code not updated: {error}")
            if request is not None:
                upi_link = request.upi_link
                qr_code = request.qr_code

        data = inputs.model_dump(exclude={"items"})
        data["items"] = items
        if data.get("bank_details") is None:
            data["bank_details"] = self._default_bank_details()
        if data.get("due_date") is None:
            data["due_date"] = date + timedelta(days=self._settings.default_due_days)
        data.update(totals.model_dump(exclude={"warnings"}))

        return Bill(
            **data,
            warnings=warnings,
            id=record_id,
            bill_id=bill_id,
            sequence=sequence,
            date=date,
            upi_link=upi_link,
            qr_code=qr_code,
            created_at=created_at,
            updated_at=_utc_now(),
        )

    # --- persistence ------------------------------------------------------

    async def _allocate(self) -> tuple[str, int]:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            if not self._repository:
                raise RuntimeError("Mock bill repository not configured")
            return await self._repository.allocate()

        try:
            data = await self._client.post("/bills/sequence", {})
            return str(data["id"]), int(data["sequence"])
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error while allocating a bill sequence")
            raise ServiceError("Failed to allocate bill sequence", cause=exc)

    async def _save(self, bill: Bill) -> Bill:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            if not self._repository:
                raise RuntimeError("Mock bill repository not configured")
            return await self._repository.save(bill)

        try:
            data = await self._client.post("/bills", bill.model_dump(mode="json"))
            return Bill(**data)
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error while saving bill %s", bill.bill_id)
            raise ServiceError("Failed to save bill", cause=exc)

    async def _load_all(self) -> List[Bill]:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            if not self._repository:
                raise RuntimeError("Mock bill repository not configured")
            return await self._repository.list()

        try:
            data = await self._client.post("/bills/list", {})
            return [Bill(**item) for item in data.get("items", [])]
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error while listing bills")
            raise ServiceError("Failed to list bills", cause=exc)

    async def get(self, bill_id: str) -> Bill:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            if not self._repository:
                raise RuntimeError("Mock bill repository not configured")
            bill = await self._repository.get(bill_id)
            if bill is None:
                raise BillNotFoundError(bill_id)
            return bill

        try:
            data = await self._client.post("/bills/get", {"id": bill_id})
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error while loading bill %s", bill_id)
            raise ServiceError("Failed to load bill", cause=exc)
        if not data:
            raise BillNotFoundError(bill_id)
        return Bill(**data)

    async def delete(self, bill_id: str) -> bool:
        logger.info("Deleting bill %s", bill_id)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            if not self._repository:
                raise RuntimeError("Mock bill repository not configured")
            deleted = await self._repository.delete(bill_id)
        else:
            try:
                data = await self._client.post("/bills/delete", {"id": bill_id})
                deleted = bool(data.get("deleted"))
            except ServiceError:
                raise
            except Exception as exc:  # pragma: no cover - defensive
                logger.exception("Unexpected error while deleting bill %s", bill_id)
                raise ServiceError("Failed to delete bill", cause=exc)
        if not deleted:
            raise BillNotFoundError(bill_id)
        return True

    # --- operations -------------------------------------------------------

    async def create(self, inputs: BillInputs) -> Bill:
        logger.debug("Creating bill for %s", inputs.customer_name)
        # Validate before allocating so a rejected draft does not burn a number.
        self.preview(inputs)
        if inputs.qr_amount is not None:
            require_non_negative("qr_amount", inputs.qr_amount)
        record_id, sequence = await self._allocate()
        now = _utc_now()
        bill = self._assemble(
            inputs,
            record_id=record_id,
            sequence=sequence,
            date=now,
            created_at=now,
        )
        logger.info(
            "Created bill %s total=%.2f status=%s",
            bill.bill_id,
            bill.total_amount,
            bill.status.value,
        )
        return await self._save(bill)

    async def update(self, request: BillUpdateRequest) -> Bill:
        existing = await self.get(request.id)
        bill = self._assemble(
            request.inputs,
            record_id=existing.id,
            sequence=existing.sequence,
            date=existing.date,
            created_at=existing.created_at,
            previous=existing,
        )
        logger.info(
            "Updated bill %s total=%.2f balance=%.2f status=%s",
            bill.bill_id,
            bill.total_amount,
            bill.balance,
            bill.status.value,
        )
        return await self._save(bill)

    async def record_payment(self, record: BillPaymentRecord) -> Bill:
        amount = require_non_negative("amount", record.amount)
        existing = await self.get(record.id)
        inputs = BillInputs.model_validate(
            existing.model_dump(include=set(BillInputs.model_fields))
        )
        inputs.paid_amount = round2(inputs.paid_amount + amount)
        # A fresh QR for the new balance replaces any earlier override.
        inputs.qr_amount = None
        logger.info("Recording payment of %.2f against %s", amount, existing.bill_id)
        return await self.update(BillUpdateRequest(id=existing.id, inputs=inputs))

    async def payment_link(self, request: PaymentLinkRequest) -> PaymentRequest:
        """Build a payment request, optionally for an operator-chosen amount.

        Without ``id`` all of handle, amount and note come from the request
        (falling back to configured payee details). With ``id`` and no
        ``amount`` the bill's balance is requested, and a settled bill raises
        ``NothingOwedError``.
        """
        handle = request.payee_handle or self._settings.payee_handle
        name = request.payee_display_name or self._settings.payee_display_name
        amount = request.amount
        note = request.note

        if request.id:
            bill = await self.get(request.id)
            handle = request.payee_handle or bill.payee_handle or handle
            name = request.payee_display_name or bill.payee_display_name or name
            if amount is None:
                if bill.balance <= 0:
                    raise NothingOwedError(bill.bill_id, bill.balance)
                amount = bill.balance
            note = note or default_note(bill.bill_id)

        if amount is None:
            amount = 0.0
        return build_payment_request(
            handle,
            name,
            amount,
            note or "",
            currency=self._settings.currency,
            box_size=self._settings.qr_box_size,
            border=self._settings.qr_border,
        )

    async def list(self, request: BillListRequest) -> BillListResponse:
        logger.info("Listing bills status=%s search=%s", request.status, request.search)
        bills = await self._load_all()
        term = (request.search or "").strip().lower()
        cutoff = self._cutoff(request.date_range)

        items: List[BillSummary] = []
        for bill in bills:
            if request.status is not None and bill.status != request.status:
                continue
            if term and not (
                term in bill.bill_id.lower()
                or term in bill.customer_name.lower()
                or term in bill.customer_phone
            ):
                continue
            if cutoff is not None and bill.date < cutoff:
                continue
            items.append(
                BillSummary(
                    id=bill.id,
                    bill_id=bill.bill_id,
                    customer_name=bill.customer_name,
                    customer_phone=bill.customer_phone,
                    total_amount=bill.total_amount,
                    paid_amount=bill.paid_amount,
                    balance=bill.balance,
                    status=bill.status,
                    date=bill.date,
                )
            )
        items.sort(key=lambda summary: summary.date, reverse=True)
        return BillListResponse(total=len(items), items=items)

    @staticmethod
    def _cutoff(date_range: str) -> Optional[datetime]:
        if date_range not in _DATE_RANGE_DAYS:
            return None
        now = _utc_now()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return start_of_day - timedelta(days=_DATE_RANGE_DAYS[date_range])

    async def stats(self) -> BillStats:
        bills = await self._load_all()
        return BillStats(
            total_bills=len(bills),
            total_revenue=round2(sum(bill.total_amount for bill in bills)),
            pending_amount=round2(sum(bill.balance for bill in bills)),
            paid_bills=sum(1 for bill in bills if bill.status == BillStatus.PAID),
        )
