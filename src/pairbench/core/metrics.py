"""
Observability Metrics
=====================
Central definition of Prometheus metrics and utility decorators.
"""

import time
import functools
from prometheus_client import Counter, Histogram, Gauge

# --- Metrics Definitions ---
# Runs
RUN_COUNT = Counter(
    "pairbench_runs_total",
    "Workload variant runs",
    ["workload", "variant", "status"]
)
RUN_DURATION = Histogram(
    "pairbench_run_duration_seconds",
    "Measured execution time of a workload variant",
    ["workload", "variant"]
)
RUN_MEMORY_BYTES = Gauge(
    "pairbench_run_memory_bytes",
    "Resident memory delta of the last run",
    ["workload", "variant"]
)
MEASUREMENT_DEGRADED = Counter(
    "pairbench_measurement_degraded_total",
    "Memory samples taken without a reliable reading",
    ["workload", "reason"]
)

# Cache
CACHE_ENTRIES = Gauge(
    "pairbench_cache_entries",
    "Entries in the shared record cache"
)

# API
API_REQUEST_LATENCY = Histogram(
    "pairbench_api_request_latency_seconds",
    "API request latency",
    ["endpoint"]
)


# --- Decorators ---

def track_async_latency(metric: Histogram, labels: dict = None):
    """Decorator to track async function execution time."""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
                return result
            finally:
                duration = time.time() - start_time
                if labels:
                    metric.labels(**labels).observe(duration)
                else:
                    metric.observe(duration)
        return wrapper
    return decorator
