"""
Sequential vs Parallel Aggregation
==================================
Sums ``f(i) = sum((i + k) % 7 for k in range(1000))`` over ``[0, size)``.

The optimized variant splits the range into contiguous chunks and evaluates
them on a bounded ``concurrent.futures`` pool. Partial sums are plain Python
integers, so the total is identical to the sequential sum for any partition.

Cancellation: the join polls the run context between completions. Once the
context is cancelled (or a chunk fails) every outstanding future is
cancelled, the pool is shut down and no partial sum is returned.
"""

from __future__ import annotations

import os
from concurrent.futures import (
    FIRST_COMPLETED,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from typing import Callable, List, Optional, Set, Tuple

from loguru import logger

from pairbench.core.context import RunContext
from pairbench.core.exceptions import RunCancelledError
from pairbench.core.inputs import SizeInput
from .base import WorkloadPair


INNER_TERMS = 1000
MODULUS = 7

# Seconds between cancellation checks while waiting on chunks
_POLL_INTERVAL = 0.05

ExecutorFactory = Callable[[int], Executor]


def heavy_compute(i: int) -> int:
    total = 0
    for k in range(INNER_TERMS):
        total += (i + k) % MODULUS
    return total


def _partial_sum(start: int, stop: int) -> int:
    # Module level so ProcessPoolExecutor can pickle it
    return sum(heavy_compute(i) for i in range(start, stop))


def partition(size: int, chunks: int) -> List[Tuple[int, int]]:
    """Split ``[0, size)`` into at most ``chunks`` contiguous non-empty ranges."""
    if size <= 0:
        return []
    chunks = max(1, min(chunks, size))
    base, extra = divmod(size, chunks)
    ranges = []
    start = 0
    for n in range(chunks):
        stop = start + base + (1 if n < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


def process_executor(workers: int) -> Executor:
    return ProcessPoolExecutor(max_workers=workers)


def thread_executor(workers: int) -> Executor:
    return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pairbench-agg")


class AggregationWorkload(WorkloadPair):
    """
    Args:
        max_workers: Pool size; defaults to ``os.cpu_count()``.
        chunks_per_worker: Chunks submitted per worker when ``chunks`` is unset.
        executor_factory: Builds the pool for a given worker count.
        chunks: Fixed chunk count, overriding ``chunks_per_worker``.
    """

    name = "parallel"
    title = "Sequential vs parallel aggregation"
    input_type = SizeInput

    def __init__(
        self,
        max_workers: Optional[int] = None,
        chunks_per_worker: int = 4,
        executor_factory: ExecutorFactory = process_executor,
        chunks: Optional[int] = None,
    ):
        self.max_workers = max_workers or os.cpu_count() or 1
        self.chunks_per_worker = max(1, chunks_per_worker)
        self.executor_factory = executor_factory
        self.chunks = chunks

    def baseline(self, data: SizeInput, context: RunContext) -> int:
        total = 0
        for i in range(data.size):
            total += heavy_compute(i)
        return total

    def optimized(self, data: SizeInput, context: RunContext) -> int:
        chunk_count = self.chunks or self.max_workers * self.chunks_per_worker
        ranges = partition(data.size, chunk_count)
        if not ranges:
            return 0

        context.raise_if_cancelled()
        workers = min(self.max_workers, len(ranges))
        executor = self.executor_factory(workers)
        pending: Set[Future] = set()
        total = 0
        try:
            pending = {executor.submit(_partial_sum, start, stop) for start, stop in ranges}
            while pending:
                done, pending = wait(pending, timeout=_POLL_INTERVAL, return_when=FIRST_COMPLETED)
                for future in done:
                    total += future.result()
                if pending and context.cancelled:
                    raise RunCancelledError(
                        context.workload,
                        context.variant,
                        {"outstanding_chunks": len(pending)},
                    )
        except BaseException:
            for future in pending:
                future.cancel()
            # Chunks already running cannot be interrupted; do not wait for them
            executor.shutdown(wait=False, cancel_futures=True)
            logger.warning(f"parallel aggregation aborted with {len(pending)} chunks outstanding")
            raise
        executor.shutdown(wait=True)
        return total


__all__ = [
    "AggregationWorkload",
    "heavy_compute",
    "partition",
    "process_executor",
    "thread_executor",
]
