"""
CLI Output Formatters

Provides formatted output for CLI commands: run tables, comparison
summaries and the workload listing.
"""

from typing import Any, Dict, List, Optional

from tabulate import tabulate

from pairbench.core.runner import ComparisonResult, RunResult


# Color codes for terminal output
class Colors:
    """ANSI color codes for terminal output."""
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"

    @staticmethod
    def green(text: str) -> str:
        return f"{Colors.OKGREEN}{text}{Colors.ENDC}"

    @staticmethod
    def red(text: str) -> str:
        return f"{Colors.FAIL}{text}{Colors.ENDC}"

    @staticmethod
    def yellow(text: str) -> str:
        return f"{Colors.WARNING}{text}{Colors.ENDC}"

    @staticmethod
    def bold(text: str) -> str:
        return f"{Colors.BOLD}{text}{Colors.ENDC}"


def format_bytes(value: Optional[int]) -> str:
    if value is None:
        return "-"
    size = float(value)
    for unit in ("B", "KiB", "MiB"):
        if abs(size) < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GiB"


def _run_row(run: RunResult) -> List[Any]:
    memory = format_bytes(run.memory_used_bytes)
    if run.measurement_degraded:
        memory += " (degraded)"
    return [run.workload, run.variant, f"{run.execution_time_ms} ms", memory, run.result]


def format_run_table(runs: List[RunResult]) -> str:
    """
    Format individual runs as a table.

    Args:
        runs: Run results in display order

    Returns:
        Formatted table string
    """
    if not runs:
        return "No runs."
    headers = ["Workload", "Variant", "Time", "Memory", "Result"]
    return tabulate([_run_row(r) for r in runs], headers=headers, tablefmt="grid")


def _winner_text(winner: str) -> str:
    if winner == "optimized":
        return Colors.green(winner)
    if winner == "baseline":
        return Colors.red(winner)
    return Colors.yellow(winner)


def format_comparison(comparison: ComparisonResult) -> str:
    """Side-by-side table for one workload plus the derived deltas."""
    lines = [Colors.bold(f"Workload: {comparison.workload}"), ""]
    lines.append(format_run_table([comparison.baseline, comparison.optimized]))
    lines.append("")
    lines.append(
        f"Time delta: {comparison.time_delta_ms} ms ({comparison.percent_faster}% faster)"
    )
    if comparison.memory_delta_bytes is not None:
        lines.append(
            f"Memory delta: {format_bytes(comparison.memory_delta_bytes)} "
            f"({comparison.percent_less_memory}% less)"
        )
    lines.append(f"Winner: {_winner_text(comparison.winner)}")
    return "\n".join(lines)


def format_suite(comparisons: List[ComparisonResult]) -> str:
    """One summary row per workload."""
    if not comparisons:
        return "No workloads run."
    headers = ["Workload", "Baseline", "Optimized", "Delta", "Faster", "Memory Delta", "Winner"]
    rows = [
        [
            c.workload,
            f"{c.baseline.execution_time_ms} ms",
            f"{c.optimized.execution_time_ms} ms",
            f"{c.time_delta_ms} ms",
            f"{c.percent_faster}%",
            format_bytes(c.memory_delta_bytes),
            _winner_text(c.winner),
        ]
        for c in comparisons
    ]
    return tabulate(rows, headers=headers, tablefmt="grid")


def format_workloads(workloads: List[Dict[str, Any]]) -> str:
    """Format the registry listing."""
    if not workloads:
        return "No workloads registered."
    rows = [
        [w["name"], w["title"], w["input"], "yes" if w["measuresMemory"] else "no"]
        for w in workloads
    ]
    return tabulate(rows, headers=["Name", "Description", "Input", "Memory"], tablefmt="grid")
