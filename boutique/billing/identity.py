"""Shop-facing bill identifiers (``BILL1007``)."""

from __future__ import annotations

DEFAULT_PREFIX = "BILL"
DEFAULT_OFFSET = 1000


def format_bill_id(
    sequence: int,
    *,
    prefix: str = DEFAULT_PREFIX,
    offset: int = DEFAULT_OFFSET,
) -> str:
    """Return ``prefix + (offset + sequence)``.

    ``sequence`` is zero-indexed and must come from a single authoritative
    counter; this function does not guard against duplicates.
    """
    if sequence < 0:
        raise ValueError(f"sequence must be >= 0, got {sequence}")
    return f"{prefix}{offset + sequence}"
