"""
Dependency Injection Container
==============================
Builds and wires all application dependencies.
The shared record cache lives here rather than in a module-level singleton.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from .cache import RecordCache
from .config import PairBenchConfig, get_config
from .probes import MemoryProbe, TimingProbe
from .runner import ComparisonRunner
from pairbench.storage.base import RecordStore
from pairbench.storage.sqlite_store import SQLiteRecordStore
from pairbench.workloads import WorkloadRegistry, build_registry


@dataclass
class Container:
    """
    Container holding all wired application dependencies.
    """
    config: PairBenchConfig
    store: Optional[RecordStore] = None
    cache: Optional[RecordCache] = None
    registry: Optional[WorkloadRegistry] = None
    runner: Optional[ComparisonRunner] = None


def build_container(
    config: Optional[PairBenchConfig] = None,
    store: Optional[RecordStore] = None,
) -> Container:
    """
    Build and wire all application dependencies.

    Args:
        config: Validated PairBenchConfig instance. Defaults to ``get_config()``.
        store: Record store to use instead of the configured SQLite file.

    Returns:
        Container with all dependencies initialized.
    """
    if config is None:
        config = get_config()
    container = Container(config=config)

    if store is None:
        store = SQLiteRecordStore(config.store.db_path)
        if config.store.seed_on_startup:
            store.seed(
                customers=config.store.customers,
                order_items=config.store.order_items,
                random_seed=config.store.random_seed,
            )
    container.store = store

    container.cache = RecordCache()
    container.registry = build_registry(container.store, container.cache, config)
    container.runner = ComparisonRunner(
        container.registry,
        timing_probe=TimingProbe(),
        memory_probe=MemoryProbe(
            reclaim_hint=config.probe.reclaim_hint,
            settle_ms=config.probe.settle_ms,
        ),
        cache=container.cache,
    )

    logger.info(f"Container ready: workloads={container.registry.names()} store={store.name}")
    return container


def build_test_container(
    config: Optional[PairBenchConfig] = None,
    store: Optional[RecordStore] = None,
) -> Container:
    """
    Build a container for testing with default config and an optional store double.

    Args:
        config: Optional test config. If None, uses default config.
        store: Optional test double for the record store.

    Returns:
        Container suitable for testing.
    """
    if config is None:
        config = PairBenchConfig()
    return build_container(config, store=store)
