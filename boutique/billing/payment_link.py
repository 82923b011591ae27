"""UPI payment deep links and their QR code rendering.

A payment request is a projection of the current bill state. It is rebuilt
whenever the payee, amount or note changes and is never the record of what
was actually collected.
"""

from __future__ import annotations

import base64
import io
import logging
import re
from typing import Optional, Tuple
from urllib.parse import quote

import qrcode
from qrcode.exceptions import DataOverflowError

from boutique.billing.money import format_amount, require_non_negative
from boutique.schemas.billing import PaymentRequest
from boutique.services.exceptions import EncodingFailed

logger = logging.getLogger(__name__)

UPI_SCHEME = "upi://pay"
UPI_HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9._-]{2,256}@[A-Za-z]{2,64}$")

# Left unescaped, as by encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"

DEFAULT_BOX_SIZE = 10
DEFAULT_BORDER = 2


def encode_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def default_note(bill_id: str) -> str:
    return f"Bill {bill_id}"


def validate_handle(payee_handle: Optional[str]) -> str:
    handle = (payee_handle or "").strip()
    if not handle:
        raise EncodingFailed("Payee UPI handle is empty")
    if not UPI_HANDLE_PATTERN.match(handle):
        raise EncodingFailed(f"Payee UPI handle {handle!r} is malformed")
    return handle


def build_upi_link(
    payee_handle: str,
    payee_name: str,
    amount: float,
    note: str,
    *,
    currency: str = "INR",
) -> str:
    """Build ``upi://pay?pa=..&pn=..&am=..&cu=..&tn=..`` in that fixed order."""
    handle = validate_handle(payee_handle)
    amount = require_non_negative("amount", amount)
    return (
        f"{UPI_SCHEME}?pa={handle}"
        f"&pn={encode_component(payee_name)}"
        f"&am={format_amount(amount)}"
        f"&cu={currency}"
        f"&tn={encode_component(note)}"
    )


def render_qr_data_url(
    uri: str,
    *,
    box_size: int = DEFAULT_BOX_SIZE,
    border: int = DEFAULT_BORDER,
) -> str:
    """Render ``uri`` as a PNG QR code and return it as a ``data:`` URL.

    Output depends only on the arguments, so the same link always yields the
    same payload.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    try:
        qr.add_data(uri)
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        raise EncodingFailed(
            "Payment link is too large for a QR code", upi_link=uri, cause=exc
        ) from exc

    image = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    image.save(buffer)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def build_payment_request(
    payee_handle: str,
    payee_display_name: str,
    amount: float,
    note: str,
    *,
    currency: str = "INR",
    box_size: int = DEFAULT_BOX_SIZE,
    border: int = DEFAULT_BORDER,
) -> PaymentRequest:
    upi_link = build_upi_link(
        payee_handle, payee_display_name, amount, note, currency=currency
    )
    qr_code = render_qr_data_url(upi_link, box_size=box_size, border=border)
    return PaymentRequest(
        payee_handle=payee_handle.strip(),
        payee_display_name=payee_display_name,
        amount=float(format_amount(amount)),
        note=note,
        upi_link=upi_link,
        qr_code=qr_code,
    )


def refresh_payment_request(
    previous: Optional[PaymentRequest],
    payee_handle: str,
    payee_display_name: str,
    amount: float,
    note: str,
    **options,
) -> Tuple[Optional[PaymentRequest], Optional[EncodingFailed]]:
    """Rebuild a payment request, keeping ``previous`` if encoding fails.

    Returns ``(request, error)``. On failure ``request`` is ``previous`` so a
    broken code is never shown in place of the last good one.
    """
    try:
        return (
            build_payment_request(
                payee_handle, payee_display_name, amount, note, **options
            ),
            None,
        )
    except EncodingFailed as exc:
        logger.warning("Keeping previous payment QR code: %s", exc)
        return previous, exc
