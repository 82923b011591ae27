class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DownstreamServiceError(ServiceError):
    """Raised when the document store returns an error response."""

    def __init__(self, message: str, status_code: int | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class BillNotFoundError(ServiceError):
    """Raised when a bill id does not resolve to a stored bill."""

    def __init__(self, bill_id: str):
        super().__init__(f"Bill {bill_id} not found")
        self.bill_id = bill_id


class NothingOwedError(ServiceError):
    """Raised when a payment request is asked for a bill with no balance due."""

    def __init__(self, bill_id: str, balance: float):
        super().__init__(f"Nothing owed on bill {bill_id} (balance {balance:.2f})")
        self.bill_id = bill_id
        self.balance = balance


class InvalidAmount(ServiceError, ValueError):
    """A negative (or non-numeric) amount was supplied for a billing field."""

    def __init__(self, field: str, value: object):
        super().__init__(f"{field} must be a non-negative number, got {value!r}")
        self.field = field
        self.value = value


class EncodingFailed(ServiceError):
    """The payment link could not be built or rendered into a QR code.

    ``upi_link`` carries the raw deep link when one was built, so callers can
    show it as a textual fallback.
    """

    def __init__(self, message: str, *, upi_link: str | None = None, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.upi_link = upi_link


class OverpaymentWarning(UserWarning):
    """Paid amount exceeds the bill total. Reported, never raised."""

    def __init__(self, total_amount: float, paid_amount: float):
        super().__init__(
            f"Paid amount {paid_amount:.2f} exceeds total {total_amount:.2f}"
        )
        self.total_amount = total_amount
        self.paid_amount = paid_amount
        self.excess = paid_amount - total_amount
