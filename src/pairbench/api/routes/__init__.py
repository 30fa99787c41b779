"""
API Route Modules
=================
Routes are organized by functional area:
- performance: workload runs, comparisons, workload listing
- health: service info and health checks
"""

from .performance import router as performance_router
from .health import router as health_router

__all__ = [
    "performance_router",
    "health_router",
]
