"""
Uncached vs Prefetch-Cached Access
==================================
The baseline asks the store for every identifier. The optimized variant looks
up which identifiers the shared cache does not hold yet, fetches only those in
a single store call, stores them and then answers from the cache.

A second optimized run over identifiers that are already cached makes no
store call at all. Unknown identifiers are never cached, so they are fetched
again (and dropped again) on every run.
"""

from __future__ import annotations

from loguru import logger

from pairbench.core.cache import RecordCache
from pairbench.core.context import RunContext
from pairbench.core.inputs import IdentifierInput
from pairbench.storage.base import Customer, RecordStore
from .base import WorkloadPair


class PrefetchWorkload(WorkloadPair):
    name = "cache"
    title = "Uncached vs prefetch-cached repeated access"
    input_type = IdentifierInput

    def __init__(self, store: RecordStore, cache: RecordCache[int, Customer]):
        self.store = store
        self.cache = cache

    def baseline(self, data: IdentifierInput, context: RunContext) -> int:
        resolved = 0
        for customer_id in data.ids:
            context.raise_if_cancelled()
            if self.store.find_by_id(customer_id) is not None:
                resolved += 1
        return resolved

    def optimized(self, data: IdentifierInput, context: RunContext) -> int:
        if not data.ids:
            return 0

        missing = self.cache.missing(data.ids)
        if missing:
            context.raise_if_cancelled()
            fetched = self.store.find_all_by_ids(missing)
            inserted = self.cache.put_many({c.id: c for c in fetched})
            logger.debug(
                f"cache prefetch: {len(missing)} missing, {len(fetched)} fetched, {inserted} inserted"
            )

        return len(self.cache.get_many(data.ids))


__all__ = ["PrefetchWorkload"]
