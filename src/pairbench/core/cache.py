"""
Record Cache
============
Process-wide prefetch cache shared by all requests of the cache workload.

The cache is unbounded and has no TTL. Once a key is present it is never
invalidated, so entries can go stale relative to the record store. Entries
live until the process exits. Tests construct their own isolated instance.
"""

from __future__ import annotations

import threading
from typing import Dict, Generic, Hashable, Iterable, List, Optional, TypeVar


K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class RecordCache(Generic[K, V]):
    """
    Thread-safe key/value map with insert-if-absent writes.

    Readers and writers from different requests need no external locking.
    Writes of a key that is already present are no-ops, so two requests that
    resolve the same missing key at the same time both succeed and the cache
    keeps exactly one entry.
    """

    def __init__(self):
        self._entries: Dict[K, V] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self._misses += 1
            else:
                self._hits += 1
            return value

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def missing(self, keys: Iterable[K]) -> List[K]:
        """Keys not yet cached, deduplicated, in first-seen order."""
        seen = set()
        result = []
        with self._lock:
            for key in keys:
                if key in seen:
                    continue
                seen.add(key)
                if key not in self._entries:
                    result.append(key)
        return result

    def put(self, key: K, value: V) -> bool:
        """Insert ``value`` unless ``key`` is present. Returns True if inserted."""
        with self._lock:
            if key in self._entries:
                return False
            self._entries[key] = value
            return True

    def put_many(self, items: Dict[K, V]) -> int:
        """Insert-if-absent for every item. Returns the number of new entries."""
        inserted = 0
        with self._lock:
            for key, value in items.items():
                if key not in self._entries:
                    self._entries[key] = value
                    inserted += 1
        return inserted

    def get_many(self, keys: Iterable[K]) -> List[V]:
        """Cached values for ``keys`` in request order; absent keys are skipped."""
        with self._lock:
            result = []
            for key in keys:
                value = self._entries.get(key)
                if value is None:
                    self._misses += 1
                else:
                    self._hits += 1
                    result.append(value)
            return result

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
            }


__all__ = ["RecordCache"]
