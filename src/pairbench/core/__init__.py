"""
PairBench Core
==============
Probes, run context, comparison runner, configuration and errors.

The dependency container lives in ``pairbench.core.container``.
"""

from .cache import RecordCache
from .context import RunContext
from .exceptions import (
    PairBenchError,
    InvalidInputError,
    UnknownWorkloadError,
    CollaboratorFailureError,
    RunCancelledError,
    ConfigurationError,
)
from .inputs import IdentifierInput, SizeInput, LookupInput
from .probes import TimingProbe, MemoryProbe, MemorySample
from .runner import Variant, RunResult, ComparisonResult, ComparisonRunner

__all__ = [
    "RecordCache",
    "RunContext",
    "PairBenchError",
    "InvalidInputError",
    "UnknownWorkloadError",
    "CollaboratorFailureError",
    "RunCancelledError",
    "ConfigurationError",
    "IdentifierInput",
    "SizeInput",
    "LookupInput",
    "TimingProbe",
    "MemoryProbe",
    "MemorySample",
    "Variant",
    "RunResult",
    "ComparisonResult",
    "ComparisonRunner",
]
