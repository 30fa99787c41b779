"""
Record Store Contract
=====================
Data-access collaborator consumed by the batched-access and cache workloads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class Customer:
    id: int
    name: str


@dataclass(frozen=True)
class OrderItem:
    """An order item; belongs to exactly one customer."""

    id: int
    customer_id: int
    product: str
    quantity: int

    @property
    def owner_id(self) -> int:
        return self.customer_id


class RecordStore(ABC):
    """
    Abstract keyed/batched lookup over customers and their order items.

    Implementations raise CollaboratorFailureError when a call fails and
    never retry internally.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name used in errors and logs."""
        pass

    @abstractmethod
    def find_by_owner_id(self, owner_id: int) -> List[OrderItem]:
        """Order items belonging to one customer."""
        pass

    @abstractmethod
    def find_by_owner_id_in(self, owner_ids: Sequence[int]) -> List[OrderItem]:
        """Order items belonging to any of the given customers, in one call."""
        pass

    @abstractmethod
    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        """A single customer, or None."""
        pass

    @abstractmethod
    def find_all_by_ids(self, customer_ids: Sequence[int]) -> List[Customer]:
        """Customers for the given ids, in one call. Unknown ids are skipped."""
        pass

    @abstractmethod
    def ping(self) -> bool:
        """True when the backend answers."""
        pass

    @property
    @abstractmethod
    def round_trips(self) -> int:
        """Number of data-access calls made so far."""
        pass


__all__ = ["Customer", "OrderItem", "RecordStore"]
