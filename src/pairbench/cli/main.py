"""
PairBench CLI - Main Entry Point

Command-line interface for running workload comparisons locally.

Usage:
    pairbench list                                   # Registered workloads
    pairbench run lookup after --size 1000           # One variant
    pairbench compare nplus1 --ids 1,2,3             # Baseline vs optimized
    pairbench suite --json > results.json            # Every workload
    pairbench seed --reset                           # Recreate sample data
    pairbench serve --port 8080                      # Start the HTTP API
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from loguru import logger

from pairbench.core.config import PairBenchConfig, get_config, load_config
from pairbench.core.exceptions import PairBenchError
from pairbench.core.inputs import IdentifierInput
from pairbench.cli.formatters import (
    format_comparison,
    format_run_table,
    format_suite,
    format_workloads,
)


# ============================================================================
# Helpers
# ============================================================================

def _get_config(ctx) -> PairBenchConfig:
    if "config" not in ctx.obj:
        config_path = ctx.obj.get("config_path")
        ctx.obj["config"] = load_config(Path(config_path)) if config_path else get_config()
    return ctx.obj["config"]


def _get_container(ctx):
    """Container from ``ctx.obj`` (tests inject one) or built from config."""
    if ctx.obj.get("container") is None:
        from pairbench.core.container import build_container
        ctx.obj["container"] = build_container(_get_config(ctx))
    return ctx.obj["container"]


def _input_kwargs(config: PairBenchConfig, ids: Optional[str], size, target, repeats) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"size": size, "target": target, "repeats": repeats}
    if ids is not None:
        kwargs["ids"] = IdentifierInput.parse_csv(ids, config.workloads.max_identifiers).ids
    return kwargs


def _fail(ctx, exc: PairBenchError, output_json: bool) -> None:
    if output_json:
        click.echo(json.dumps({"success": False, **exc.to_dict()}, indent=2))
    else:
        click.echo(f"Error: {exc}", err=True)
    ctx.exit(1)


def input_options(func):
    """Shared workload input options."""
    func = click.option("--repeats", type=int, default=None, help="Lookup repetitions")(func)
    func = click.option("--target", type=int, default=None, help="Lookup target value")(func)
    func = click.option("--size", "-n", type=int, default=None, help="Workload magnitude")(func)
    func = click.option("--ids", help="Comma-separated record ids, e.g. 1,2,3")(func)
    return func


# ============================================================================
# CLI Group and Main Entry
# ============================================================================

@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to config.yaml file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def cli(ctx, config: Optional[str], verbose: bool):
    """
    PairBench - Comparative Benchmarking Harness

    Runs baseline and optimized implementations of the same operation on
    identical inputs and reports their time and memory side by side.
    """
    ctx.ensure_object(dict)

    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config

    # Configure logging
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


# ============================================================================
# CLI Commands
# ============================================================================

@cli.command("list")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_workloads(ctx, output_json: bool):
    """List registered workloads."""
    container = _get_container(ctx)
    workloads = [w.describe() for w in container.registry]
    if output_json:
        click.echo(json.dumps({"workloads": workloads}, indent=2))
    else:
        click.echo(format_workloads(workloads))


@cli.command()
@click.argument("workload")
@click.argument("variant", default="optimized")
@input_options
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def run(ctx, workload: str, variant: str, ids, size, target, repeats, output_json: bool):
    """
    Run one variant of a workload.

    VARIANT is baseline/optimized (or before/after).

    Example:
        pairbench run lookup baseline --size 100000 --target 99999 --repeats 500
    """
    from pairbench.workloads import build_input

    container = _get_container(ctx)
    try:
        pair = container.registry.get(workload)
        data = build_input(pair, container.config.workloads, **_input_kwargs(container.config, ids, size, target, repeats))
        result = container.runner.run(pair.name, variant, data)
    except PairBenchError as e:
        _fail(ctx, e, output_json)
        return

    if output_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.echo(format_run_table([result]))


@cli.command()
@click.argument("workload")
@input_options
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def compare(ctx, workload: str, ids, size, target, repeats, output_json: bool):
    """
    Run baseline then optimized on the same input.

    Example:
        pairbench compare nplus1 --ids 1,2,3
    """
    from pairbench.workloads import build_input

    container = _get_container(ctx)
    try:
        pair = container.registry.get(workload)
        data = build_input(pair, container.config.workloads, **_input_kwargs(container.config, ids, size, target, repeats))
        comparison = container.runner.compare_both(pair.name, data)
    except PairBenchError as e:
        _fail(ctx, e, output_json)
        return

    if output_json:
        click.echo(json.dumps(comparison.to_dict(), indent=2))
    else:
        click.echo(format_comparison(comparison))


@cli.command()
@click.option(
    "--ids",
    default="1,2,3,4,5,6,7,8,9,10",
    show_default=True,
    help="Record ids for the identifier workloads",
)
@click.option("--skip", multiple=True, help="Workload to leave out (repeatable)")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def suite(ctx, ids: str, skip: tuple, output_json: bool):
    """
    Compare every registered workload with default inputs.

    Example:
        pairbench suite --skip parallel
    """
    from pairbench.workloads import build_input

    container = _get_container(ctx)
    comparisons = []
    try:
        id_values = IdentifierInput.parse_csv(ids, container.config.workloads.max_identifiers).ids
        for pair in container.registry:
            if pair.name in skip:
                continue
            data = build_input(pair, container.config.workloads, ids=id_values)
            comparisons.append(container.runner.compare_both(pair.name, data))
    except PairBenchError as e:
        _fail(ctx, e, output_json)
        return

    if output_json:
        click.echo(json.dumps({"results": [c.to_dict() for c in comparisons]}, indent=2))
    else:
        click.echo(format_suite(comparisons))


@cli.command()
@click.option("--reset", is_flag=True, help="Delete existing rows first")
@click.option("--customers", type=int, default=None, help="Number of customers")
@click.option("--order-items", type=int, default=None, help="Number of order items")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def seed(ctx, reset: bool, customers: Optional[int], order_items: Optional[int], output_json: bool):
    """
    Populate the record store with sample customers and order items.

    Example:
        pairbench seed --reset --customers 1000 --order-items 5000
    """
    from pairbench.storage.sqlite_store import SQLiteRecordStore

    config = _get_config(ctx)
    try:
        store = SQLiteRecordStore(config.store.db_path)
        if reset:
            store.reset()
        counts = store.seed(
            customers=config.store.customers if customers is None else customers,
            order_items=config.store.order_items if order_items is None else order_items,
            random_seed=config.store.random_seed,
        )
    except PairBenchError as e:
        _fail(ctx, e, output_json)
        return

    if output_json:
        click.echo(json.dumps({"success": True, "db_path": str(store.db_path), **counts}, indent=2))
    else:
        click.echo(f"Record store: {store.db_path}")
        click.echo(f"Customers: {counts['customers']}")
        click.echo(f"Order items: {counts['order_items']}")


@cli.command()
@click.option("--host", default=None, help="Bind address (default from config)")
@click.option("--port", "-p", type=int, default=None, help="Port (default from config)")
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int]):
    """Start the HTTP API with uvicorn."""
    import uvicorn
    from pairbench.api.main import create_app

    config = _get_config(ctx)
    app = create_app(config=config, container=ctx.obj.get("container"))
    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or config.server.port,
    )


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
