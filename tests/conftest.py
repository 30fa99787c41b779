import sys
import dataclasses
from pathlib import Path

import pytest
from loguru import logger


# Ensure local src/ package and tests.mocks imports work without editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for path in (SRC, ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """
    Configure custom pytest markers.

    This function is called by pytest at startup to register custom markers.
    """
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow-running (use pytest -m 'not slow' to skip)"
    )


def pytest_addoption(parser):
    """Add custom command-line options for pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests"
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow flag is passed."""
    if config.getoption("--run-slow", default=False):
        return
    skip_slow = pytest.mark.skip(reason="Slow test skipped. Use --run-slow to run.")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


# =============================================================================
# Global State
# =============================================================================

@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Reset config state between tests."""
    from pairbench.core.config import reset_config
    monkeypatch.delenv("PAIRBENCH_DEBUG", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks added by the code under test (e.g. the CLI)."""
    yield
    logger.remove()


@pytest.fixture
def log_messages():
    """Collect loguru records emitted during the test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)


# =============================================================================
# Stores, Config and Container
# =============================================================================

@pytest.fixture
def store():
    """Five customers; customers 1 and 2 own order items, 3 to 5 own none."""
    from tests.mocks import sample_store
    return sample_store()


@pytest.fixture
def sqlite_store(tmp_path):
    """A small seeded SQLite store in a temporary directory."""
    from pairbench.storage.sqlite_store import SQLiteRecordStore
    db = SQLiteRecordStore(str(tmp_path / "records.db"))
    db.seed(customers=50, order_items=200, random_seed=7)
    return db


@pytest.fixture
def test_config(tmp_path):
    """Default config with fast probes, a thread pool and a temp database path."""
    from pairbench.core.config import PairBenchConfig, ParallelConfig, ProbeConfig, StoreConfig
    base = PairBenchConfig()
    return dataclasses.replace(
        base,
        store=StoreConfig(db_path=str(tmp_path / "pairbench.db"), customers=50, order_items=200),
        probe=ProbeConfig(reclaim_hint=True, settle_ms=0),
        parallel=ParallelConfig(max_workers=2, chunks_per_worker=2, executor="thread"),
    )


@pytest.fixture
def container(test_config, store):
    """Container wired to the in-memory sample store."""
    from pairbench.core.container import build_test_container
    return build_test_container(test_config, store=store)
