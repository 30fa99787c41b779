"""
Mock Infrastructure for PairBench Tests
=======================================
In-memory record stores for offline testing without a database file.

Usage:
    from tests.mocks import InMemoryRecordStore, UnreachableRecordStore, sample_store
"""

from .mock_store import InMemoryRecordStore, UnreachableRecordStore, sample_store

__all__ = ["InMemoryRecordStore", "UnreachableRecordStore", "sample_store"]
