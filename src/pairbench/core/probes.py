"""
Measurement Probes
==================
Timing and resident-memory probes wrapped around a single workload variant.

TimingProbe reads a monotonic clock immediately around the operation and
reports whole milliseconds.

MemoryProbe samples the process resident set size (RSS) before and after the
operation. The figure is an approximation: RSS includes allocator slack,
interpreter caches and anything other threads allocate at the same time, and
freed memory is not always returned to the OS. The optional reclamation hint
(a full ``gc.collect()`` followed by a short settle delay) improves the odds
that released objects are gone before the second reading, nothing more.
Results are noisy and host-dependent; treat them as a trend indicator.
"""

from __future__ import annotations

import gc
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, TypeVar

import psutil
from loguru import logger


T = TypeVar("T")


class TimingProbe:
    """Measure elapsed wall-clock time of a synchronous operation."""

    def measure(self, op: Callable[[], T]) -> Tuple[T, int]:
        """
        Run ``op`` and return its value with the elapsed time in whole ms.

        Exceptions raised by ``op`` propagate; no time is reported for them.
        """
        start = time.perf_counter_ns()
        value = op()
        end = time.perf_counter_ns()
        return value, max(0, (end - start) // 1_000_000)


@dataclass(frozen=True)
class MemorySample:
    """Before/after RSS readings and the clamped delta."""

    before_bytes: int
    after_bytes: int
    delta_bytes: int
    reclaimed: bool = False
    degraded: bool = False
    degraded_reason: Optional[str] = None


class MemoryProbe:
    """
    Best-effort resident memory delta around an operation.

    Args:
        reclaim_hint: Run ``gc.collect()`` between the operation and the second
            reading. Disabling it marks every sample as degraded.
        settle_ms: Delay after the reclamation pass before reading RSS again.
    """

    def __init__(self, reclaim_hint: bool = True, settle_ms: int = 50):
        self.reclaim_hint = reclaim_hint
        self.settle_ms = settle_ms
        self._process = psutil.Process()

    def read_rss(self) -> Optional[int]:
        """Current RSS in bytes, or None when the host refuses to report it."""
        try:
            return self._process.memory_info().rss
        except (psutil.AccessDenied, psutil.NoSuchProcess) as e:
            logger.warning(f"Could not read process RSS: {e}")
            return None

    def reclaim(self) -> bool:
        """
        Request a best-effort reclamation pass.

        Returns True when a pass ran. Platforms or configurations without
        explicit collection control return False.
        """
        if not self.reclaim_hint:
            return False
        gc.collect()
        return True

    def sample_delta(self, op: Callable[[], T]) -> Tuple[T, MemorySample]:
        """
        Run ``op`` between two RSS readings.

        The delta is ``max(0, after - before)``; an operation that frees more
        than it allocates reports 0.
        """
        before = self.read_rss()
        value = op()

        reclaimed = self.reclaim()
        if reclaimed and self.settle_ms > 0:
            time.sleep(self.settle_ms / 1000.0)

        after = self.read_rss()

        degraded_reason = None
        if before is None or after is None:
            degraded_reason = "rss_unavailable"
            before, after = before or 0, after or 0
        elif not reclaimed:
            degraded_reason = "reclaim_hint_skipped"

        sample = MemorySample(
            before_bytes=before,
            after_bytes=after,
            delta_bytes=max(0, after - before),
            reclaimed=reclaimed,
            degraded=degraded_reason is not None,
            degraded_reason=degraded_reason,
        )
        return value, sample


__all__ = ["TimingProbe", "MemoryProbe", "MemorySample"]
