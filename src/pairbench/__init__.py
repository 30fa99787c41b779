"""
PairBench - Comparative Benchmarking Harness
============================================

Runs two competing implementations of the same logical operation
("baseline" and "optimized") under identical inputs and reports their
wall-clock cost and memory footprint side by side.

Built-in workload pairs:
    - nplus1: per-item vs batched data access
    - memory: retained vs released allocations
    - lookup: linear scan vs hashed index
    - stream: side-effecting vs pure iteration
    - cache: uncached vs prefetch-cached access
    - parallel: sequential vs parallel aggregation

Main Packages:
    - core: probes, runner, config, errors, dependency container
    - workloads: the workload pair contract and the six pairs
    - storage: record store collaborator (SQLite)
    - api: FastAPI HTTP boundary
    - cli: Command-line interface

Quick Start:
    from pairbench.core.container import build_container
    from pairbench.core.inputs import LookupInput

    container = build_container()
    pair = container.runner.compare_both("lookup", LookupInput(100000, 99999, 500))
    print(pair.to_dict())
"""

__version__ = "1.0.0"
