"""Linear-scan vs hashed-index membership lookup."""

from __future__ import annotations

from pairbench.core.context import RunContext
from pairbench.core.inputs import LookupInput
from .base import WorkloadPair


class LookupWorkload(WorkloadPair):
    name = "lookup"
    title = "Linear-scan vs hashed-index lookup"
    input_type = LookupInput

    def baseline(self, data: LookupInput, context: RunContext) -> int:
        candidates = list(range(data.size))
        hits = 0
        for _ in range(data.repeats):
            if data.target in candidates:
                hits += 1
        return hits

    def optimized(self, data: LookupInput, context: RunContext) -> int:
        index = set(range(data.size))
        hits = 0
        for _ in range(data.repeats):
            if data.target in index:
                hits += 1
        return hits


__all__ = ["LookupWorkload"]
