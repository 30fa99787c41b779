"""
PairBench CLI - Command Line Interface for the benchmarking harness

Provides terminal commands for:
- Listing workloads
- Running a single variant
- Comparing baseline and optimized variants
- Running the whole suite
- Seeding the record store
- Serving the HTTP API
"""

from .main import cli

__all__ = ["cli"]
