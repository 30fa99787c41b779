"""
Performance Routes
==================
Run endpoints for each workload variant, side-by-side comparison and the
workload listing.

``before`` maps to the baseline variant and ``after`` to the optimized one.
Runs are blocking, so each one is dispatched to the default thread pool and
concurrent requests execute on independent threads.
"""

import asyncio
import functools
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, Request

from pairbench.api.models import CompareRequest, CompareResponse, RunResponse, WorkloadListResponse
from pairbench.core.container import Container
from pairbench.core.metrics import API_REQUEST_LATENCY, track_async_latency
from pairbench.core.runner import ComparisonResult, RunResult, Variant
from pairbench.workloads import build_input

router = APIRouter(tags=["Performance"])


def get_container(request: Request) -> Container:
    return request.app.state.container


async def _run(container: Container, workload_name: str, variant: str, **raw: Any) -> dict:
    workload = container.registry.get(workload_name)
    data = build_input(workload, container.config.workloads, **raw)
    loop = asyncio.get_running_loop()
    result: RunResult = await loop.run_in_executor(
        None,
        functools.partial(container.runner.run, workload.name, Variant.parse(variant), data),
    )
    return result.to_dict()


# --- Identifier workloads ---

@router.post("/nplus1/{variant}", response_model=RunResponse, response_model_exclude_none=True)
async def nplus1(
    variant: str,
    ids: Any = Body(..., description="JSON array of customer ids"),
    container: Container = Depends(get_container),
):
    """Order items grouped per customer: one query per id vs one batched query."""
    return await _run(container, "nplus1", variant, ids=ids)


@router.post("/cache/{variant}", response_model=RunResponse, response_model_exclude_none=True)
async def cache(
    variant: str,
    ids: Any = Body(..., description="JSON array of customer ids"),
    container: Container = Depends(get_container),
):
    """Customer lookup: always hitting the store vs prefetching into the shared cache."""
    return await _run(container, "cache", variant, ids=ids)


# --- Size workloads ---

@router.get("/memory/{variant}", response_model=RunResponse, response_model_exclude_none=True)
async def memory(
    variant: str,
    size: Optional[int] = Query(None, description="Number of buffers to allocate"),
    container: Container = Depends(get_container),
):
    return await _run(container, "memory", variant, size=size)


@router.get("/lookup/{variant}", response_model=RunResponse, response_model_exclude_none=True)
async def lookup(
    variant: str,
    size: Optional[int] = Query(None, description="Candidate range [0, size)"),
    target: Optional[int] = Query(None, description="Value to look up"),
    repeats: Optional[int] = Query(None, description="Number of lookups"),
    container: Container = Depends(get_container),
):
    return await _run(container, "lookup", variant, size=size, target=target, repeats=repeats)


@router.get("/stream/{variant}", response_model=RunResponse, response_model_exclude_none=True)
async def stream(
    variant: str,
    size: Optional[int] = Query(None, description="Number of elements"),
    container: Container = Depends(get_container),
):
    return await _run(container, "stream", variant, size=size)


@router.get("/parallel/{variant}", response_model=RunResponse, response_model_exclude_none=True)
async def parallel(
    variant: str,
    size: Optional[int] = Query(None, description="Upper bound of the aggregated range"),
    container: Container = Depends(get_container),
):
    return await _run(container, "parallel", variant, size=size)


# --- Comparison ---

@router.post("/compare/{workload}", response_model=CompareResponse, response_model_exclude_none=True)
@track_async_latency(API_REQUEST_LATENCY, {"endpoint": "/compare"})
async def compare(
    workload: str,
    req: Optional[CompareRequest] = None,
    container: Container = Depends(get_container),
):
    """Run baseline then optimized on the same input."""
    req = req or CompareRequest()
    pair = container.registry.get(workload)
    data = build_input(
        pair,
        container.config.workloads,
        ids=req.ids,
        size=req.size,
        target=req.target,
        repeats=req.repeats,
    )
    loop = asyncio.get_running_loop()
    result: ComparisonResult = await loop.run_in_executor(
        None,
        functools.partial(container.runner.compare_both, pair.name, data),
    )
    return result.to_dict()


@router.get("/workloads", response_model=WorkloadListResponse)
async def list_workloads(container: Container = Depends(get_container)):
    return {"workloads": [w.describe() for w in container.registry]}
