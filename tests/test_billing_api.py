from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from boutique.main import app
from boutique.mcp_server import BillPreviewInput, PaymentLinkInput, bill_preview, payment_link
from boutique.schemas.billing import DiscountSpec, LineItem
from boutique.services.mock_store import reset_mock_store


@pytest.fixture(autouse=True)
def _reset_store() -> None:
    reset_mock_store()
    yield
    reset_mock_store()


def _bill_payload(**overrides):
    payload = {
        "customer_name": "Anita Rao",
        "customer_phone": "9876543210",
        "items": [{"description": "Kurta stitching", "quantity": 2, "rate": 500}],
        "tax_percent": 18,
        "discount": {"value": 100, "kind": "amount"},
        "payee_handle": "swethascouture@paytm",
        "payee_display_name": "Swetha's Couture",
    }
    payload.update(overrides)
    return payload


def test_preview_returns_totals_without_persisting() -> None:
    client = TestClient(app)

    response = client.post(
        "/tools/billing/preview",
        json={
            "customer_name": "Walk-in",
            "items": [{"description": "Saree", "quantity": 1, "rate": 1000}],
            "discount": {"value": 10, "kind": "percentage"},
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["tax_amount"] == 0.0
    assert body["discount_amount"] == 100.0
    assert body["total_amount"] == 900.0
    assert body["status"] == "unpaid"

    listing = client.post("/tools/billing/list", json={})
    assert listing.json()["total"] == 0


def test_preview_rejects_negative_amounts() -> None:
    client = TestClient(app)

    response = client.post(
        "/tools/billing/preview",
        json=_bill_payload(paid_amount=-5),
    )

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "paid_amount"


def test_create_then_pay_flow() -> None:
    client = TestClient(app)

    created = client.post("/tools/billing/create", json=_bill_payload())
    assert created.status_code == 200
    bill = created.json()
    assert bill["bill_id"] == "BILL1000"
    assert bill["total_amount"] == 1080.0
    assert bill["items"][0]["amount"] == 1000.0
    assert bill["upi_link"].endswith("&am=1080.00&cu=INR&tn=Bill%20BILL1000")

    paid = client.post(
        "/tools/billing/record-payment",
        json={"id": bill["id"], "amount": 1200},
    )
    assert paid.status_code == 200
    settled = paid.json()
    assert settled["balance"] == -120.0
    assert settled["status"] == "paid"
    assert settled["warnings"]

    stats = client.get("/tools/billing/stats")
    assert stats.json() == {
        "total_bills": 1,
        "total_revenue": 1080.0,
        "pending_amount": -120.0,
        "paid_bills": 1,
    }


def test_payment_link_for_settled_bill_returns_409() -> None:
    client = TestClient(app)
    bill = client.post("/tools/billing/create", json=_bill_payload()).json()
    client.post("/tools/billing/record-payment", json={"id": bill["id"], "amount": 1200})

    response = client.post("/tools/billing/payment-link", json={"id": bill["id"]})

    assert response.status_code == 409
    assert "Nothing owed on bill BILL1000" in response.json()["detail"]


def test_payment_link_endpoint_falls_back_to_raw_link_detail() -> None:
    client = TestClient(app)

    ok = client.post(
        "/tools/billing/payment-link",
        json={"payee_handle": "shop@upi", "amount": 250, "note": "Bill BILL1003"},
    )
    assert ok.status_code == 200
    assert ok.json()["upi_link"].startswith("upi://pay?pa=shop@upi&")

    too_big = client.post(
        "/tools/billing/payment-link",
        json={"payee_handle": "shop@upi", "amount": 250, "note": "n" * 5000},
    )
    assert too_big.status_code == 422
    assert too_big.json()["detail"]["upi_link"].startswith("upi://pay?pa=shop@upi&")


def test_unknown_bill_returns_404() -> None:
    client = TestClient(app)

    assert client.post("/tools/billing/get", json={"id": "B-99999"}).status_code == 404
    assert client.post("/tools/billing/delete", json={"id": "B-99999"}).status_code == 404


def test_delete_bill() -> None:
    client = TestClient(app)
    bill = client.post("/tools/billing/create", json=_bill_payload()).json()

    response = client.post("/tools/billing/delete", json={"id": bill["id"]})

    assert response.status_code == 200
    assert response.json() == {"status": "deleted", "id": bill["id"]}
    assert client.post("/tools/billing/get", json={"id": bill["id"]}).status_code == 404


def test_health() -> None:
    client = TestClient(app)
    assert client.get("/health").json()["ok"] is True


def test_mcp_tools_compute_like_the_api() -> None:
    totals = asyncio.run(
        bill_preview(
            BillPreviewInput(
                items=[LineItem(description="Kurta stitching", quantity=2, rate=500)],
                tax_percent=18,
                discount=DiscountSpec(value=100),
            ),
            None,
        )
    )
    assert totals.total_amount == 1080.0

    request = asyncio.run(
        payment_link(
            PaymentLinkInput(amount=1080, note="Bill BILL1007", payee_handle="shop@upi"),
            None,
        )
    )
    assert request.upi_link.endswith("&am=1080.00&cu=INR&tn=Bill%20BILL1007")


def test_mcp_preview_ignores_blank_rows_like_the_api() -> None:
    client = TestClient(app)
    items = [
        {"description": "Blouse stitching", "quantity": 1, "rate": 800},
        {"description": "   ", "quantity": 1, "rate": 250},
    ]

    api_totals = client.post(
        "/tools/billing/preview",
        json={"customer_name": "Walk-in", "items": items},
    ).json()
    mcp_totals = asyncio.run(
        bill_preview(BillPreviewInput(items=[LineItem(**item) for item in items]), None)
    )

    assert mcp_totals.subtotal == 800.0
    assert mcp_totals.subtotal == api_totals["subtotal"]
    assert mcp_totals.total_amount == api_totals["total_amount"]
