"""
Workload Pair Contract
======================
Every workload exposes two variants of the same logical operation. Both take
the same validated input and return the same small JSON-safe summary, so the
runner can time them side by side.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Type

from pairbench.core.context import RunContext


class WorkloadPair(ABC):
    """Base class for a baseline/optimized workload pair."""

    #: Registry key
    name: str = ""
    #: Human readable description shown by /workloads and the CLI
    title: str = ""
    #: Input value object accepted by both variants
    input_type: Type[Any] = object
    #: Only memory-measuring workloads are wrapped in the memory probe
    measures_memory: bool = False

    @abstractmethod
    def baseline(self, data: Any, context: RunContext) -> Any:
        """Reference (slower) implementation."""
        pass

    @abstractmethod
    def optimized(self, data: Any, context: RunContext) -> Any:
        """Improved implementation; must produce the same summary as baseline."""
        pass

    def describe(self) -> dict:
        return {
            "name": self.name,
            "title": self.title,
            "input": self.input_type.__name__,
            "measuresMemory": self.measures_memory,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = ["WorkloadPair"]
