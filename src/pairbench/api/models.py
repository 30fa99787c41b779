"""
API Request/Response Models
===========================
Pydantic models for the benchmark endpoints.

Field names are camelCase on the wire to match the dashboard client.
"""

from typing import Optional, Any, List, Union
from pydantic import BaseModel, Field, field_validator


class RunResponse(BaseModel):
    """Result of one variant run."""
    executionTimeMs: int = Field(..., ge=0, description="Wall-clock time in whole milliseconds")
    result: Union[bool, int] = Field(..., description="Workload summary")
    memoryUsedBytes: Optional[int] = Field(
        default=None,
        ge=0,
        description="Resident memory delta; only reported by memory-measuring workloads"
    )
    measurementDegraded: Optional[bool] = Field(
        default=None,
        description="Set when the memory reading could not be taken reliably"
    )


class CompareRequest(BaseModel):
    """Inputs for a side-by-side comparison. Unused fields are ignored."""
    ids: Optional[List[Any]] = Field(
        default=None,
        description="Record identifiers for nplus1 and cache",
        examples=[[1, 2, 3]]
    )
    size: Optional[int] = Field(default=None, description="Workload magnitude")
    target: Optional[int] = Field(default=None, description="Lookup target")
    repeats: Optional[int] = Field(default=None, description="Lookup repetitions")

    @field_validator('size', 'repeats')
    @classmethod
    def validate_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError('must be >= 0')
        return v


class CompareResponse(BaseModel):
    """Baseline and optimized results with derived deltas."""
    workload: str
    baseline: RunResponse
    optimized: RunResponse
    timeDeltaMs: int
    percentFaster: int
    winner: str
    memoryDeltaBytes: Optional[int] = None
    percentLessMemory: Optional[int] = None


class WorkloadInfo(BaseModel):
    name: str
    title: str
    input: str
    measuresMemory: bool


class WorkloadListResponse(BaseModel):
    workloads: List[WorkloadInfo]


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str
    code: str
    recoverable: bool
    context: Optional[dict] = None
    traceback: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    store_reachable: bool
    store_backend: str
    store_round_trips: int
    cache_entries: int
    workloads: int
    timestamp: str


class RootResponse(BaseModel):
    """Root endpoint response model."""
    status: str
    service: str
    version: str
    timestamp: str
