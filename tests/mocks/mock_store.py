"""
Mock Record Stores
==================
In-memory RecordStore implementations for offline testing.

InMemoryRecordStore behaves like the SQLite store and records every call.
UnreachableRecordStore fails every data-access call with
CollaboratorFailureError, like a store whose database went away.
"""

import threading
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pairbench.core.exceptions import CollaboratorFailureError
from pairbench.storage.base import Customer, OrderItem, RecordStore


class InMemoryRecordStore(RecordStore):
    """Dict-backed store that keeps a log of (operation, argument) calls."""

    def __init__(
        self,
        customers: Iterable[Customer] = (),
        order_items: Iterable[OrderItem] = (),
    ):
        self._customers: Dict[int, Customer] = {c.id: c for c in customers}
        self._items: List[OrderItem] = list(order_items)
        self._lock = threading.Lock()
        self.calls: List[Tuple[str, object]] = []

    @property
    def name(self) -> str:
        return "memory"

    @property
    def round_trips(self) -> int:
        with self._lock:
            return len(self.calls)

    def _record(self, operation: str, argument: object) -> None:
        with self._lock:
            self.calls.append((operation, argument))

    def calls_to(self, operation: str) -> List[object]:
        with self._lock:
            return [arg for op, arg in self.calls if op == operation]

    def find_by_owner_id(self, owner_id: int) -> List[OrderItem]:
        self._record("find_by_owner_id", owner_id)
        return [i for i in self._items if i.customer_id == owner_id]

    def find_by_owner_id_in(self, owner_ids: Sequence[int]) -> List[OrderItem]:
        self._record("find_by_owner_id_in", tuple(owner_ids))
        wanted = set(owner_ids)
        return [i for i in self._items if i.customer_id in wanted]

    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        self._record("find_by_id", customer_id)
        return self._customers.get(customer_id)

    def find_all_by_ids(self, customer_ids: Sequence[int]) -> List[Customer]:
        self._record("find_all_by_ids", tuple(customer_ids))
        return [self._customers[i] for i in dict.fromkeys(customer_ids) if i in self._customers]

    def ping(self) -> bool:
        return True


class UnreachableRecordStore(RecordStore):
    """Every call fails as if the database were down."""

    def __init__(self):
        self.attempts = 0

    @property
    def name(self) -> str:
        return "unreachable"

    @property
    def round_trips(self) -> int:
        return self.attempts

    def _fail(self, operation: str):
        self.attempts += 1
        raise CollaboratorFailureError(self.name, operation, "connection refused")

    def find_by_owner_id(self, owner_id: int) -> List[OrderItem]:
        self._fail("find_by_owner_id")

    def find_by_owner_id_in(self, owner_ids: Sequence[int]) -> List[OrderItem]:
        self._fail("find_by_owner_id_in")

    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        self._fail("find_by_id")

    def find_all_by_ids(self, customer_ids: Sequence[int]) -> List[Customer]:
        self._fail("find_all_by_ids")

    def ping(self) -> bool:
        return False


def sample_store() -> InMemoryRecordStore:
    """
    Five customers. Customer 1 owns two items, customer 2 owns one and
    customers 3 to 5 own none.
    """
    customers = [Customer(i, f"Customer {i}") for i in range(1, 6)]
    items = [
        OrderItem(1, 1, "Product 1", 2),
        OrderItem(2, 1, "Product 7", 1),
        OrderItem(3, 2, "Product 3", 5),
    ]
    return InMemoryRecordStore(customers, items)
