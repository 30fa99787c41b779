"""
Tests for PairBench CLI
"""

import dataclasses
import json

import pytest
import yaml
from click.testing import CliRunner

from pairbench.cli.formatters import Colors, format_bytes, format_comparison, format_workloads
from pairbench.cli.main import cli
from pairbench.core.config import WorkloadDefaults
from pairbench.core.container import build_test_container
from pairbench.core.runner import ComparisonResult, RunResult
from tests.mocks import UnreachableRecordStore


@pytest.fixture
def runner():
    """CLI test runner."""
    return CliRunner()


@pytest.fixture
def small_container(test_config, store):
    """Container whose workload defaults run in milliseconds."""
    config = dataclasses.replace(
        test_config,
        workloads=WorkloadDefaults(
            memory_size=20,
            lookup_size=1000,
            lookup_target=999,
            lookup_repeats=5,
            stream_size=100,
            parallel_size=10,
        ),
    )
    return build_test_container(config, store=store)


def invoke(runner, container, args):
    return runner.invoke(cli, args, obj={"container": container})


class TestCLIList:

    def test_list_table(self, runner, small_container):
        result = invoke(runner, small_container, ["list"])
        assert result.exit_code == 0
        for name in ("nplus1", "memory", "lookup", "stream", "cache", "parallel"):
            assert name in result.output

    def test_list_json(self, runner, small_container):
        result = invoke(runner, small_container, ["list", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [w["name"] for w in data["workloads"]][0] == "nplus1"
        memory = next(w for w in data["workloads"] if w["name"] == "memory")
        assert memory["measuresMemory"] is True


class TestCLIRun:

    def test_run_lookup_json(self, runner, small_container):
        result = invoke(
            runner,
            small_container,
            ["run", "lookup", "after", "--size", "100", "--target", "42", "--repeats", "7", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["result"] == 7
        assert "memoryUsedBytes" not in data

    def test_run_defaults_to_optimized(self, runner, small_container):
        result = invoke(runner, small_container, ["run", "stream", "-n", "12"])
        assert result.exit_code == 0
        assert "optimized" in result.output
        assert "12" in result.output

    def test_run_nplus1_ids(self, runner, small_container):
        result = invoke(runner, small_container, ["run", "nplus1", "before", "--ids", "1,2,3", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["result"] == 2

    def test_run_unknown_workload(self, runner, small_container):
        result = invoke(runner, small_container, ["run", "fibonacci"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_run_negative_size_json(self, runner, small_container):
        result = invoke(runner, small_container, ["run", "stream", "--size", "-1", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert data["code"] == "INVALID_INPUT"

    def test_run_malformed_ids(self, runner, small_container):
        result = invoke(runner, small_container, ["run", "cache", "--ids", "1,two"])
        assert result.exit_code == 1

    def test_run_store_failure(self, runner, test_config):
        container = build_test_container(test_config, store=UnreachableRecordStore())
        result = invoke(runner, container, ["run", "cache", "--ids", "1", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["code"] == "COLLABORATOR_FAILURE"


class TestCLICompare:

    def test_compare_nplus1(self, runner, small_container):
        result = invoke(runner, small_container, ["compare", "nplus1", "--ids", "1,2,3"])
        assert result.exit_code == 0
        assert "Workload: nplus1" in result.output
        assert "Winner:" in result.output

    def test_compare_json(self, runner, small_container):
        result = invoke(runner, small_container, ["compare", "memory", "--size", "5", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["baseline"]["result"] == data["optimized"]["result"] == 5 * 1024
        assert "memoryDeltaBytes" in data

    def test_compare_identifier_workload_requires_ids(self, runner, small_container):
        result = invoke(runner, small_container, ["compare", "cache"])
        assert result.exit_code == 1


class TestCLISuite:

    def test_suite_json(self, runner, small_container):
        result = invoke(runner, small_container, ["suite", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        names = [r["workload"] for r in data["results"]]
        assert names == ["nplus1", "memory", "lookup", "stream", "cache", "parallel"]
        nplus1 = data["results"][0]
        assert nplus1["baseline"]["result"] == 2

    def test_suite_skip(self, runner, small_container):
        result = invoke(
            runner, small_container, ["suite", "--skip", "parallel", "--skip", "memory", "--json"]
        )
        assert result.exit_code == 0
        names = [r["workload"] for r in json.loads(result.stdout)["results"]]
        assert "parallel" not in names
        assert "memory" not in names
        assert len(names) == 4

    def test_suite_table(self, runner, small_container):
        result = invoke(runner, small_container, ["suite", "--ids", "1,2"])
        assert result.exit_code == 0
        assert "lookup" in result.output


class TestCLISeed:

    @pytest.fixture
    def config_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "pairbench": {
                "store": {"db_path": str(tmp_path / "seeded.db"), "customers": 10, "order_items": 30},
            }
        }))
        return path

    def test_seed_json(self, runner, config_file):
        result = runner.invoke(cli, ["--config", str(config_file), "seed", "--json"], obj={})
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["success"] is True
        assert data["customers"] == 10
        assert data["order_items"] == 30

    def test_seed_is_idempotent_and_reset(self, runner, config_file):
        runner.invoke(cli, ["--config", str(config_file), "seed"], obj={})
        again = runner.invoke(
            cli, ["--config", str(config_file), "seed", "--customers", "3", "--json"], obj={}
        )
        assert json.loads(again.stdout)["customers"] == 10

        reset = runner.invoke(
            cli,
            ["--config", str(config_file), "seed", "--reset", "--customers", "3", "--order-items", "4", "--json"],
            obj={},
        )
        data = json.loads(reset.stdout)
        assert data["customers"] == 3
        assert data["order_items"] == 4


class TestFormatters:

    def test_colors(self):
        assert Colors.green("ok").startswith("\033[92m")
        assert Colors.red("x").endswith("\033[0m")

    @pytest.mark.parametrize("value,expected", [
        (None, "-"),
        (512, "512 B"),
        (2048, "2.0 KiB"),
        (3 * 1024 * 1024, "3.0 MiB"),
    ])
    def test_format_bytes(self, value, expected):
        assert format_bytes(value) == expected

    def test_format_comparison_memory_line(self):
        comparison = ComparisonResult(
            workload="memory",
            baseline=RunResult(10, 1, "memory", "baseline", memory_used_bytes=4096),
            optimized=RunResult(5, 1, "memory", "optimized", memory_used_bytes=1024),
        )
        text = format_comparison(comparison)
        assert "50% faster" in text
        assert "Memory delta: 3.0 KiB (75% less)" in text

    def test_format_workloads_empty(self):
        assert format_workloads([]) == "No workloads registered."
