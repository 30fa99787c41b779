"""
PairBench Configuration System
==============================
Centralized, validated configuration with environment variable overrides.
"""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field

import yaml

from pairbench.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class StoreConfig:
    db_path: str = "./data/pairbench.db"
    seed_on_startup: bool = True
    customers: int = 1000
    order_items: int = 5000
    random_seed: int = 42


@dataclass(frozen=True)
class ProbeConfig:
    reclaim_hint: bool = True
    settle_ms: int = 50


@dataclass(frozen=True)
class WorkloadDefaults:
    """Defaults applied when an endpoint omits a query parameter."""
    memory_size: int = 10000
    lookup_size: int = 100000
    lookup_target: int = 99999
    lookup_repeats: int = 500
    stream_size: int = 100000
    parallel_size: int = 20000
    buffer_length: int = 1024
    max_identifiers: int = 10000


@dataclass(frozen=True)
class ParallelConfig:
    max_workers: Optional[int] = None  # None = os.cpu_count()
    chunks_per_worker: int = 4
    executor: str = "process"  # "process" | "thread"


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = "/api/performance"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class ObservabilityConfig:
    log_level: str = "INFO"
    json_logs: bool = False


@dataclass(frozen=True)
class PairBenchConfig:
    """Root configuration for PairBench."""

    version: str = "1.0"
    store: StoreConfig = field(default_factory=StoreConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    workloads: WorkloadDefaults = field(default_factory=WorkloadDefaults)
    parallel: ParallelConfig = field(default_factory=ParallelConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)


def _env_override(key: str, default):
    """Check for PAIRBENCH_<KEY> environment variable override."""
    env_key = f"PAIRBENCH_{key.upper()}"
    val = os.environ.get(env_key)
    if val is None:
        return default
    # Type coercion based on the default's type
    if isinstance(default, bool):
        return val.lower() in ("true", "1", "yes")
    if isinstance(default, int):
        try:
            return int(val)
        except ValueError:
            raise ConfigurationError(config_key=env_key, reason=f"expected an integer, got {val!r}")
    return val


def _parse_optional_positive_int(value: Optional[object]) -> Optional[int]:
    """Parse positive int values. Non-positive/invalid values become None."""
    if value is None:
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def _require_non_negative(key: str, value: int) -> int:
    if value < 0:
        raise ConfigurationError(config_key=key, reason=f"must be >= 0, got {value}")
    return value


def load_config(path: Optional[Path] = None) -> PairBenchConfig:
    """
    Load configuration from YAML file with environment variable overrides.

    Priority: ENV > YAML > defaults.

    Args:
        path: Path to config.yaml. If None, searches ./config.yaml and the project root.

    Returns:
        Validated PairBenchConfig instance.

    Raises:
        ConfigurationError: If a value is out of range or has the wrong type.
    """
    if path is None:
        candidates = [
            Path("config.yaml"),
            Path(__file__).parent.parent.parent.parent / "config.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                path = candidate
                break

    raw = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
            raw = loaded.get("pairbench") or {}

    # Build store config
    store_raw = raw.get("store") or {}
    store = StoreConfig(
        db_path=_env_override("DB_PATH", store_raw.get("db_path", "./data/pairbench.db")),
        seed_on_startup=_env_override("SEED_ON_STARTUP", store_raw.get("seed_on_startup", True)),
        customers=_require_non_negative(
            "store.customers", _env_override("SEED_CUSTOMERS", store_raw.get("customers", 1000))
        ),
        order_items=_require_non_negative(
            "store.order_items", _env_override("SEED_ORDER_ITEMS", store_raw.get("order_items", 5000))
        ),
        random_seed=_env_override("SEED_RANDOM_SEED", store_raw.get("random_seed", 42)),
    )

    # Build probe config
    probe_raw = raw.get("probe") or {}
    probe = ProbeConfig(
        reclaim_hint=_env_override("PROBE_RECLAIM_HINT", probe_raw.get("reclaim_hint", True)),
        settle_ms=_require_non_negative(
            "probe.settle_ms", _env_override("PROBE_SETTLE_MS", probe_raw.get("settle_ms", 50))
        ),
    )

    # Build workload defaults
    wl_raw = raw.get("workloads") or {}
    workloads = WorkloadDefaults(
        memory_size=_env_override("MEMORY_SIZE", wl_raw.get("memory_size", 10000)),
        lookup_size=_env_override("LOOKUP_SIZE", wl_raw.get("lookup_size", 100000)),
        lookup_target=_env_override("LOOKUP_TARGET", wl_raw.get("lookup_target", 99999)),
        lookup_repeats=_env_override("LOOKUP_REPEATS", wl_raw.get("lookup_repeats", 500)),
        stream_size=_env_override("STREAM_SIZE", wl_raw.get("stream_size", 100000)),
        parallel_size=_env_override("PARALLEL_SIZE", wl_raw.get("parallel_size", 20000)),
        buffer_length=_env_override("BUFFER_LENGTH", wl_raw.get("buffer_length", 1024)),
        max_identifiers=_env_override("MAX_IDENTIFIERS", wl_raw.get("max_identifiers", 10000)),
    )
    if workloads.buffer_length <= 0:
        raise ConfigurationError(
            config_key="workloads.buffer_length",
            reason=f"must be positive, got {workloads.buffer_length}",
        )

    # Build parallel config
    par_raw = raw.get("parallel") or {}
    env_workers = os.environ.get("PAIRBENCH_PARALLEL_MAX_WORKERS")
    parallel = ParallelConfig(
        max_workers=_parse_optional_positive_int(
            env_workers if env_workers is not None else par_raw.get("max_workers")
        ),
        chunks_per_worker=_env_override("PARALLEL_CHUNKS_PER_WORKER", par_raw.get("chunks_per_worker", 4)),
        executor=_env_override("PARALLEL_EXECUTOR", par_raw.get("executor", "process")),
    )
    if parallel.executor not in ("process", "thread"):
        raise ConfigurationError(
            config_key="parallel.executor",
            reason=f"must be 'process' or 'thread', got {parallel.executor!r}",
        )
    if parallel.chunks_per_worker < 1:
        raise ConfigurationError(
            config_key="parallel.chunks_per_worker",
            reason=f"must be >= 1, got {parallel.chunks_per_worker}",
        )

    # Build server config
    srv_raw = raw.get("server") or {}

    # Parse CORS origins from env (comma-separated) or config
    cors_env = os.environ.get("PAIRBENCH_CORS_ORIGINS")
    if cors_env:
        cors_origins = [o.strip() for o in cors_env.split(",")]
    else:
        cors_origins = srv_raw.get("cors_origins", ["*"])

    server = ServerConfig(
        host=_env_override("HOST", srv_raw.get("host", "0.0.0.0")),
        port=_env_override("PORT", srv_raw.get("port", 8080)),
        api_prefix=_env_override("API_PREFIX", srv_raw.get("api_prefix", "/api/performance")),
        cors_origins=cors_origins,
    )

    # Build observability config
    obs_raw = raw.get("observability") or {}
    observability = ObservabilityConfig(
        log_level=_env_override("LOG_LEVEL", obs_raw.get("log_level", "INFO")),
        json_logs=_env_override("JSON_LOGS", obs_raw.get("json_logs", False)),
    )

    return PairBenchConfig(
        version=raw.get("version", "1.0"),
        store=store,
        probe=probe,
        workloads=workloads,
        parallel=parallel,
        server=server,
        observability=observability,
    )


# Module-level singleton (lazy-loaded)
_CONFIG: Optional[PairBenchConfig] = None


def get_config() -> PairBenchConfig:
    """Get or initialize the global config singleton."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG


def reset_config():
    """Reset the global config singleton (useful for testing)."""
    global _CONFIG
    _CONFIG = None
