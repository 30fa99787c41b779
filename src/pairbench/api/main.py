"""
PairBench REST API
==================
FastAPI server exposing the workload runs under the configured prefix
(``/api/performance`` by default), plus service info, health and metrics.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from pairbench.core.config import PairBenchConfig, get_config
from pairbench.core.container import Container, build_container
from pairbench.core.logging_config import configure_logging
from pairbench.core.exceptions import (
    PairBenchError,
    CollaboratorFailureError,
    RunCancelledError,
    ValidationError,
    NotFoundError,
    is_debug_mode,
)
from pairbench.api.routes import health_router, performance_router
from pairbench.api.version import get_version

# --- Observability ---
from prometheus_client import make_asgi_app


def _status_code_for(exc: PairBenchError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, CollaboratorFailureError):
        return 502  # Bad Gateway: the record store failed
    if isinstance(exc, RunCancelledError):
        return 503
    return 500


async def pairbench_exception_handler(request: Request, exc: PairBenchError):
    """
    Centralized exception handler for all PairBench errors.
    Returns JSON with error details and stacktrace only in DEBUG mode.
    """
    if exc.recoverable:
        logger.warning(f"Recoverable error: {exc}")
    else:
        logger.error(f"Irrecoverable error: {exc}")

    return JSONResponse(
        status_code=_status_code_for(exc),
        content=exc.to_dict(include_traceback=is_debug_mode()),
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed requests are invalid input, reported like InvalidInputError."""
    logger.error(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "error": "Request validation failed",
            "code": "INVALID_INPUT",
            "recoverable": False,
            "context": {"errors": jsonable_encoder(exc.errors())},
        },
    )


def create_app(
    config: Optional[PairBenchConfig] = None,
    container: Optional[Container] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Configuration; defaults to ``get_config()``.
        container: Pre-built container (tests). When omitted the container
            is built at startup, which opens and seeds the record store.
    """
    if config is None:
        config = container.config if container is not None else get_config()

    configure_logging(
        level=config.observability.log_level,
        json_format=config.observability.json_logs or None,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "container", None) is None:
            logger.info("Building dependency container...")
            app.state.container = build_container(config)
        logger.info(f"PairBench API ready under {config.server.api_prefix}")

        yield

        logger.info("PairBench API shutting down")

    app = FastAPI(
        title="PairBench API",
        description="Comparative benchmarking harness - baseline vs optimized workload runs",
        version=get_version(),
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_exception_handler(PairBenchError, pairbench_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.server.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount Prometheus metrics
    app.mount("/metrics", make_asgi_app())

    app.include_router(health_router)
    app.include_router(performance_router, prefix=config.server.api_prefix)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    cfg = get_config()
    uvicorn.run(app, host=cfg.server.host, port=cfg.server.port)
