"""
Comparison Runner
=================
Resolves a workload by name, runs one or both variants under the probes and
produces directly comparable results.

Probe nesting for memory-measuring workloads::

    MemoryProbe.sample_delta(
        TimingProbe.measure(variant)
    )

so the reclamation pass and settle delay are never counted as execution time.
Objects a variant retained through its RunContext are released only after
the second RSS reading.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from loguru import logger

from .cache import RecordCache
from .context import RunContext
from .exceptions import InvalidInputError, PairBenchError
from .metrics import CACHE_ENTRIES, MEASUREMENT_DEGRADED, RUN_COUNT, RUN_DURATION, RUN_MEMORY_BYTES
from .probes import MemoryProbe, TimingProbe


class Variant(str, Enum):
    BASELINE = "baseline"
    OPTIMIZED = "optimized"

    @classmethod
    def parse(cls, value: "str | Variant") -> "Variant":
        """Accept ``baseline``/``optimized`` and the ``before``/``after`` aliases."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        aliases = {"before": cls.BASELINE, "after": cls.OPTIMIZED}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidInputError(
                field="variant",
                reason="must be one of baseline, optimized, before, after",
                value=value,
            )


@dataclass(frozen=True)
class RunResult:
    """Outcome of one variant run."""

    execution_time_ms: int
    result: Any
    workload: str = ""
    variant: str = ""
    memory_used_bytes: Optional[int] = None
    measurement_degraded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "executionTimeMs": self.execution_time_ms,
            "result": self.result,
        }
        if self.memory_used_bytes is not None:
            data["memoryUsedBytes"] = self.memory_used_bytes
        if self.measurement_degraded:
            data["measurementDegraded"] = True
        return data


def _percent(delta: int, reference: int) -> int:
    if reference == 0:
        return 0
    return round(delta / reference * 100)


@dataclass(frozen=True)
class ComparisonResult:
    """A baseline/optimized pair for one workload with the derived deltas."""

    workload: str
    baseline: RunResult
    optimized: RunResult

    @property
    def time_delta_ms(self) -> int:
        return self.baseline.execution_time_ms - self.optimized.execution_time_ms

    @property
    def percent_faster(self) -> int:
        return _percent(self.time_delta_ms, self.baseline.execution_time_ms)

    @property
    def memory_delta_bytes(self) -> Optional[int]:
        if self.baseline.memory_used_bytes is None or self.optimized.memory_used_bytes is None:
            return None
        return self.baseline.memory_used_bytes - self.optimized.memory_used_bytes

    @property
    def percent_less_memory(self) -> Optional[int]:
        delta = self.memory_delta_bytes
        if delta is None:
            return None
        return _percent(delta, self.baseline.memory_used_bytes)

    @property
    def winner(self) -> str:
        if self.time_delta_ms > 0:
            return "optimized"
        if self.time_delta_ms < 0:
            return "baseline"
        return "tie"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "workload": self.workload,
            "baseline": self.baseline.to_dict(),
            "optimized": self.optimized.to_dict(),
            "timeDeltaMs": self.time_delta_ms,
            "percentFaster": self.percent_faster,
            "winner": self.winner,
        }
        if self.memory_delta_bytes is not None:
            data["memoryDeltaBytes"] = self.memory_delta_bytes
            data["percentLessMemory"] = self.percent_less_memory
        return data


class ComparisonRunner:
    """
    Run workload variants from a registry under the timing and memory probes.

    Safe to call from several threads at once. Runs share only the record
    cache and process RSS, so memory figures of overlapping runs interfere.
    """

    def __init__(
        self,
        registry,
        timing_probe: Optional[TimingProbe] = None,
        memory_probe: Optional[MemoryProbe] = None,
        cache: Optional[RecordCache] = None,
    ):
        self.registry = registry
        self.timing_probe = timing_probe or TimingProbe()
        self.memory_probe = memory_probe or MemoryProbe()
        self.cache = cache

    def run(
        self,
        workload_name: str,
        variant: "str | Variant",
        data: Any,
        context: Optional[RunContext] = None,
    ) -> RunResult:
        """
        Run one variant of ``workload_name`` on ``data``.

        Args:
            workload_name: Registry name, e.g. ``"lookup"``.
            variant: ``Variant`` or one of its names/aliases.
            data: Validated input of the workload's ``input_type``.
            context: Optional caller-owned context, e.g. to cancel from another thread.

        Raises:
            UnknownWorkloadError: ``workload_name`` is not registered.
            InvalidInputError: ``data`` does not match the workload input type.
            CollaboratorFailureError: The record store failed.
            RunCancelledError: The run was cancelled before completion.
        """
        workload = self.registry.get(workload_name)
        variant = Variant.parse(variant)

        if not isinstance(data, workload.input_type):
            raise InvalidInputError(
                field="data",
                reason=f"{workload.name} expects {workload.input_type.__name__}, got {type(data).__name__}",
            )

        if context is None:
            context = RunContext(workload.name, variant.value, self.memory_probe)
        method = workload.baseline if variant is Variant.BASELINE else workload.optimized

        def timed():
            return self.timing_probe.measure(lambda: method(data, context))

        sample = None
        try:
            if workload.measures_memory:
                (value, elapsed_ms), sample = self.memory_probe.sample_delta(timed)
            else:
                value, elapsed_ms = timed()
        except PairBenchError as e:
            RUN_COUNT.labels(workload.name, variant.value, e.error_code).inc()
            raise
        except Exception:
            RUN_COUNT.labels(workload.name, variant.value, "error").inc()
            raise
        finally:
            context.release()

        degraded = bool(sample and sample.degraded)
        if degraded:
            logger.warning(
                f"{workload.name} {variant.value} memory measurement degraded: {sample.degraded_reason}"
            )
            MEASUREMENT_DEGRADED.labels(workload.name, sample.degraded_reason).inc()

        result = RunResult(
            execution_time_ms=elapsed_ms,
            result=value,
            workload=workload.name,
            variant=variant.value,
            memory_used_bytes=sample.delta_bytes if sample else None,
            measurement_degraded=degraded,
        )

        logger.info(f"{workload.name} {variant.value} execution time: {elapsed_ms} ms")
        RUN_COUNT.labels(workload.name, variant.value, "ok").inc()
        RUN_DURATION.labels(workload.name, variant.value).observe(elapsed_ms / 1000.0)
        if sample is not None:
            RUN_MEMORY_BYTES.labels(workload.name, variant.value).set(sample.delta_bytes)
        if self.cache is not None:
            CACHE_ENTRIES.set(len(self.cache))
        return result

    def compare_both(self, workload_name: str, data: Any) -> ComparisonResult:
        """
        Run baseline then optimized on the same input.

        A failure of either run propagates unchanged; no partial comparison
        is returned.
        """
        baseline = self.run(workload_name, Variant.BASELINE, data)
        try:
            optimized = self.run(workload_name, Variant.OPTIMIZED, data)
        except Exception as e:
            logger.error(
                f"{workload_name} optimized run failed after baseline succeeded: {type(e).__name__}: {e}"
            )
            raise
        return ComparisonResult(workload=baseline.workload, baseline=baseline, optimized=optimized)


__all__ = ["Variant", "RunResult", "ComparisonResult", "ComparisonRunner"]
