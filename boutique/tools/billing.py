from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException

from boutique.dependencies.services import get_billing_service
from boutique.schemas.billing import (
    Bill,
    BillInputs,
    BillListRequest,
    BillListResponse,
    BillLookupRequest,
    BillPaymentRecord,
    BillStats,
    BillTotals,
    BillUpdateRequest,
    PaymentLinkRequest,
    PaymentRequest,
)
from boutique.services import BillingService
from boutique.services.exceptions import (
    BillNotFoundError,
    EncodingFailed,
    InvalidAmount,
    NothingOwedError,
    ServiceError,
)

router = APIRouter()


def _raise_http(exc: ServiceError) -> NoReturn:
    if isinstance(exc, InvalidAmount):
        raise HTTPException(
            status_code=422,
            detail={"message": str(exc), "field": exc.field},
        ) from exc
    if isinstance(exc, EncodingFailed):
        raise HTTPException(
            status_code=422,
            detail={"message": str(exc), "upi_link": exc.upi_link},
        ) from exc
    if isinstance(exc, BillNotFoundError):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if isinstance(exc, NothingOwedError):
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.post("/preview", response_model=BillTotals)
async def preview_bill(
    req: BillInputs,
    service: BillingService = Depends(get_billing_service),
):
    try:
        return service.preview(req)
    except ServiceError as exc:
        _raise_http(exc)


@router.post("/create", response_model=Bill)
async def create_bill(
    req: BillInputs,
    service: BillingService = Depends(get_billing_service),
):
    try:
        return await service.create(req)
    except ServiceError as exc:
        _raise_http(exc)


@router.post("/update", response_model=Bill)
async def update_bill(
    req: BillUpdateRequest,
    service: BillingService = Depends(get_billing_service),
):
    try:
        return await service.update(req)
    except ServiceError as exc:
        _raise_http(exc)


@router.post("/record-payment", response_model=Bill)
async def record_payment(
    req: BillPaymentRecord,
    service: BillingService = Depends(get_billing_service),
):
    try:
        return await service.record_payment(req)
    except ServiceError as exc:
        _raise_http(exc)


@router.post("/payment-link", response_model=PaymentRequest)
async def payment_link(
    req: PaymentLinkRequest,
    service: BillingService = Depends(get_billing_service),
):
    try:
        return await service.payment_link(req)
    except ServiceError as exc:
        _raise_http(exc)


@router.post("/list", response_model=BillListResponse)
async def list_bills(
    req: BillListRequest,
    service: BillingService = Depends(get_billing_service),
):
    try:
        return await service.list(req)
    except ServiceError as exc:
        _raise_http(exc)


@router.post("/get", response_model=Bill)
async def get_bill(
    req: BillLookupRequest,
    service: BillingService = Depends(get_billing_service),
):
    try:
        return await service.get(req.id)
    except ServiceError as exc:
        _raise_http(exc)


@router.post("/delete")
async def delete_bill(
    req: BillLookupRequest,
    service: BillingService = Depends(get_billing_service),
):
    try:
        await service.delete(req.id)
    except ServiceError as exc:
        _raise_http(exc)
    return {"status": "deleted", "id": req.id}


@router.get("/stats", response_model=BillStats)
async def bill_stats(
    service: BillingService = Depends(get_billing_service),
):
    try:
        return await service.stats()
    except ServiceError as exc:
        _raise_http(exc)
