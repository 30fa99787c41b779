"""
Run Context
===========
Per-run handle passed to a workload variant.
"""

from __future__ import annotations

import gc
import threading
from typing import Any, List, Optional

from .exceptions import RunCancelledError
from .probes import MemoryProbe


class RunContext:
    """
    State for one execution of one variant.

    Objects passed to ``retain`` stay reachable until the runner calls
    ``release()``, which happens after the memory reading. The cancellation
    flag may be set from another thread.
    """

    def __init__(self, workload: str, variant: str, memory_probe: Optional[MemoryProbe] = None):
        self.workload = workload
        self.variant = variant
        self._memory_probe = memory_probe
        self._retained: List[Any] = []
        self._cancelled = threading.Event()

    def retain(self, obj: Any) -> None:
        self._retained.append(obj)

    @property
    def retained_count(self) -> int:
        return len(self._retained)

    def release(self) -> None:
        self._retained.clear()

    def request_reclamation(self) -> bool:
        """Best-effort reclamation pass. Returns True when a pass ran."""
        if self._memory_probe is not None:
            return self._memory_probe.reclaim()
        gc.collect()
        return True

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def raise_if_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise RunCancelledError(self.workload, self.variant)


__all__ = ["RunContext"]
