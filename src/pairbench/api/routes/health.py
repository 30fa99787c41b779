"""
Health Routes
=============
Service info and health check endpoints.
"""

import asyncio
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request

from pairbench.core.container import Container
from pairbench.api.models import HealthResponse, RootResponse
from pairbench.api.version import get_version

router = APIRouter(tags=["Health"])


def get_container(request: Request) -> Container:
    return request.app.state.container


@router.get("/", response_model=RootResponse)
async def root():
    return {
        "status": "ok",
        "service": "PairBench",
        "version": get_version(),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/health", response_model=HealthResponse)
async def health(container: Container = Depends(get_container)):
    loop = asyncio.get_running_loop()
    store_reachable = await loop.run_in_executor(None, container.store.ping)

    return {
        "status": "healthy" if store_reachable else "degraded",
        "store_reachable": store_reachable,
        "store_backend": container.store.name,
        "store_round_trips": container.store.round_trips,
        "cache_entries": len(container.cache),
        "workloads": len(container.registry),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
