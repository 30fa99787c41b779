"""
PairBench Storage
=================
Record store collaborator used by the data-access workloads.

    - RecordStore: abstract keyed and batched lookup contract
    - SQLiteRecordStore: customers / order_items in a SQLite file
"""

from .base import Customer, OrderItem, RecordStore
from .sqlite_store import SQLiteRecordStore

__all__ = ["Customer", "OrderItem", "RecordStore", "SQLiteRecordStore"]
