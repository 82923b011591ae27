"""Service package public API definitions.

Service implementations are imported lazily. ``boutique.clients.store`` and
the billing core import ``boutique.services.exceptions`` at import time; an
eager import of ``BillingService`` here would pull those modules back in
while they are still initialising.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "BillingService",
]

_SERVICE_MODULES = {
    "BillingService": "billing",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .billing import BillingService as BillingService
