"""
Batched vs Per-Item Access
==========================
The classic N+1 pattern: one store call per owner versus one call for all of
them, grouped in memory afterwards.

Both variants return the number of owners that have at least one order item.
Owners without records are left out of the grouping on both sides, so the two
groupings have identical keys and identical record sets per key.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List

from loguru import logger

from pairbench.core.context import RunContext
from pairbench.core.inputs import IdentifierInput
from pairbench.storage.base import OrderItem, RecordStore
from .base import WorkloadPair


class BatchedAccessWorkload(WorkloadPair):
    name = "nplus1"
    title = "Batched vs per-item data access (N+1 queries)"
    input_type = IdentifierInput

    def __init__(self, store: RecordStore):
        self.store = store

    def group_per_item(self, data: IdentifierInput, context: RunContext) -> Dict[int, List[OrderItem]]:
        grouping: Dict[int, List[OrderItem]] = {}
        for owner_id in data.ids:
            context.raise_if_cancelled()
            items = self.store.find_by_owner_id(owner_id)
            if items:
                grouping[owner_id] = items
        return grouping

    def group_batched(self, data: IdentifierInput, context: RunContext) -> Dict[int, List[OrderItem]]:
        if not data.ids:
            return {}
        unique_ids = list(dict.fromkeys(data.ids))
        context.raise_if_cancelled()
        items = self.store.find_by_owner_id_in(unique_ids)
        grouping: Dict[int, List[OrderItem]] = defaultdict(list)
        for item in items:
            grouping[item.owner_id].append(item)
        return dict(grouping)

    def baseline(self, data: IdentifierInput, context: RunContext) -> int:
        grouping = self.group_per_item(data, context)
        logger.debug(f"nplus1 baseline issued {len(data.ids)} store calls")
        return len(grouping)

    def optimized(self, data: IdentifierInput, context: RunContext) -> int:
        grouping = self.group_batched(data, context)
        logger.debug(f"nplus1 optimized issued {1 if data.ids else 0} store calls")
        return len(grouping)


__all__ = ["BatchedAccessWorkload"]
