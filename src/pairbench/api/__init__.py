"""
PairBench API Package
=====================
FastAPI-based REST API for the benchmarking harness.

Run Endpoints (prefix /api/performance):
    - POST /nplus1/{before,after}: JSON array of customer ids
    - GET /memory/{before,after}?size=
    - GET /lookup/{before,after}?size=&target=&repeats=
    - GET /stream/{before,after}?size=
    - POST /cache/{before,after}: JSON array of customer ids
    - GET /parallel/{before,after}?size=
    - POST /compare/{workload}: both variants on the same input
    - GET /workloads: registered workloads

Service Endpoints:
    - GET /: Service info
    - GET /health: Record store reachability and cache size
    - GET /metrics: Prometheus metrics

Example:
    import httpx

    response = httpx.get(
        "http://localhost:8080/api/performance/lookup/after",
        params={"size": 100000, "target": 99999, "repeats": 500},
    )
    print(response.json())  # {"executionTimeMs": 3, "result": 500}
"""
