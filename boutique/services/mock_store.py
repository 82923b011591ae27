from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from boutique.schemas.billing import Bill


class _BaseRepository:
    def __init__(self, prefix: str) -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def _next_id(self) -> str:
        return f"{self._prefix}-{next(self._counter):05d}"


class BillRepository(_BaseRepository):
    """In-memory stand-in for the bills collection of the document store.

    Owns the only bill sequence counter, so every allocated sequence number is
    unique for the lifetime of the repository.
    """

    def __init__(self) -> None:
        super().__init__("B")
        self._sequence = itertools.count(0)
        self._bills: Dict[str, Dict[str, object]] = {}

    async def allocate(self) -> Tuple[str, int]:
        """Reserve a storage id and the next zero-indexed bill sequence."""
        return self._next_id(), next(self._sequence)

    async def save(self, bill: Bill) -> Bill:
        self._bills[bill.id] = bill.model_dump(mode="json")
        return bill

    async def get(self, bill_id: str) -> Optional[Bill]:
        record = self._bills.get(bill_id)
        return Bill.model_validate(record) if record is not None else None

    async def list(self) -> List[Bill]:
        return [Bill.model_validate(record) for record in self._bills.values()]

    async def delete(self, bill_id: str) -> bool:
        return self._bills.pop(bill_id, None) is not None

    def rows(self) -> List[Dict[str, object]]:
        return [dict(record) for record in self._bills.values()]


@dataclass
class MockDataStore:
    bills: BillRepository


_mock_store: Optional[MockDataStore] = None


def get_mock_store() -> MockDataStore:
    global _mock_store
    if _mock_store is None:
        _mock_store = MockDataStore(bills=BillRepository())
    return _mock_store


def reset_mock_store() -> None:
    global _mock_store
    _mock_store = None
