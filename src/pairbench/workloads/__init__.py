"""
PairBench Workloads
===================
Built-in baseline/optimized pairs and the registry that names them.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Sequence

from pairbench.core.cache import RecordCache
from pairbench.core.config import PairBenchConfig, WorkloadDefaults
from pairbench.core.exceptions import InvalidInputError, UnknownWorkloadError
from pairbench.core.inputs import IdentifierInput, LookupInput, SizeInput
from pairbench.storage.base import RecordStore

from .aggregation import AggregationWorkload, process_executor, thread_executor
from .base import WorkloadPair
from .batching import BatchedAccessWorkload
from .iteration import IterationWorkload
from .lookup import LookupWorkload
from .prefetch import PrefetchWorkload
from .retention import RetentionWorkload


class WorkloadRegistry:
    """Name -> workload mapping, iterated in registration order."""

    def __init__(self, workloads: Optional[List[WorkloadPair]] = None):
        self._workloads: Dict[str, WorkloadPair] = {}
        for workload in workloads or []:
            self.register(workload)

    def register(self, workload: WorkloadPair) -> None:
        if not workload.name:
            raise ValueError(f"{workload!r} has no name")
        if workload.name in self._workloads:
            raise ValueError(f"Workload {workload.name!r} is already registered")
        self._workloads[workload.name] = workload

    def get(self, name: str) -> WorkloadPair:
        try:
            return self._workloads[name]
        except KeyError:
            raise UnknownWorkloadError(name, available=self.names())

    def names(self) -> List[str]:
        return list(self._workloads)

    def __contains__(self, name: object) -> bool:
        return name in self._workloads

    def __iter__(self) -> Iterator[WorkloadPair]:
        return iter(self._workloads.values())

    def __len__(self) -> int:
        return len(self._workloads)


def build_registry(store: RecordStore, cache: RecordCache, config: PairBenchConfig) -> WorkloadRegistry:
    """Create the six built-in workloads wired to ``store`` and ``cache``."""
    factory = thread_executor if config.parallel.executor == "thread" else process_executor
    return WorkloadRegistry([
        BatchedAccessWorkload(store),
        RetentionWorkload(buffer_length=config.workloads.buffer_length),
        LookupWorkload(),
        IterationWorkload(),
        PrefetchWorkload(store, cache),
        AggregationWorkload(
            max_workers=config.parallel.max_workers,
            chunks_per_worker=config.parallel.chunks_per_worker,
            executor_factory=factory,
        ),
    ])


_SIZE_DEFAULTS = {
    "memory": "memory_size",
    "lookup": "lookup_size",
    "stream": "stream_size",
    "parallel": "parallel_size",
}


def build_input(
    workload: WorkloadPair,
    defaults: WorkloadDefaults,
    ids: Optional[Sequence[Any]] = None,
    size: Optional[int] = None,
    target: Optional[int] = None,
    repeats: Optional[int] = None,
) -> Any:
    """
    Build the validated input for ``workload`` from loosely typed boundary values.

    Omitted size, target and repeats fall back to ``defaults``; identifier
    workloads require ``ids``.

    Raises:
        InvalidInputError: A value is missing or out of range.
    """
    if workload.input_type is IdentifierInput:
        if ids is None:
            raise InvalidInputError(field="ids", reason=f"identifier list is required for {workload.name}")
        return IdentifierInput.from_raw(ids, max_length=defaults.max_identifiers)

    if size is None:
        size = getattr(defaults, _SIZE_DEFAULTS.get(workload.name, ""), None)
        if size is None:
            raise InvalidInputError(field="size", reason=f"size is required for {workload.name}")

    if workload.input_type is LookupInput:
        return LookupInput(
            size=size,
            target=defaults.lookup_target if target is None else target,
            repeats=defaults.lookup_repeats if repeats is None else repeats,
        )
    if workload.input_type is SizeInput:
        return SizeInput(size)

    raise InvalidInputError(
        field="workload",
        reason=f"no input builder for {workload.input_type.__name__}",
        value=workload.name,
    )


__all__ = [
    "WorkloadPair",
    "WorkloadRegistry",
    "build_registry",
    "build_input",
    "BatchedAccessWorkload",
    "RetentionWorkload",
    "LookupWorkload",
    "IterationWorkload",
    "PrefetchWorkload",
    "AggregationWorkload",
]
