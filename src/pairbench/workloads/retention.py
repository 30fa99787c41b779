"""
Retained vs Released Allocations
================================
Both variants allocate ``size`` fixed-size numpy buffers. The baseline keeps
every buffer reachable through the run context until the run is over, which
shows up as resident memory growth. The optimized variant drops its
references and asks for a reclamation pass before the memory probe reads RSS
again.
"""

from __future__ import annotations

import numpy as np

from pairbench.core.context import RunContext
from pairbench.core.inputs import SizeInput
from .base import WorkloadPair


class RetentionWorkload(WorkloadPair):
    name = "memory"
    title = "Retained vs released allocations"
    input_type = SizeInput
    measures_memory = True

    def __init__(self, buffer_length: int = 1024):
        if buffer_length <= 0:
            raise ValueError("buffer_length must be positive")
        self.buffer_length = buffer_length

    def _allocate(self) -> np.ndarray:
        return np.zeros(self.buffer_length, dtype=np.int32)

    def baseline(self, data: SizeInput, context: RunContext) -> int:
        total = 0
        for _ in range(data.size):
            buf = self._allocate()
            context.retain(buf)
            total += buf.size
        return total

    def optimized(self, data: SizeInput, context: RunContext) -> int:
        total = 0
        for _ in range(data.size):
            buf = self._allocate()
            total += buf.size
            del buf
        context.request_reclamation()
        return total


__all__ = ["RetentionWorkload"]
