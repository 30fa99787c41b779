"""
Tests for the six built-in workload pairs and the registry.
"""

import pytest

from pairbench.core.cache import RecordCache
from pairbench.core.context import RunContext
from pairbench.core.exceptions import CollaboratorFailureError, RunCancelledError, UnknownWorkloadError
from pairbench.core.inputs import IdentifierInput, LookupInput, SizeInput
from pairbench.core.probes import MemoryProbe
from pairbench.workloads import (
    AggregationWorkload,
    BatchedAccessWorkload,
    IterationWorkload,
    LookupWorkload,
    PrefetchWorkload,
    RetentionWorkload,
    WorkloadRegistry,
    build_registry,
)
from pairbench.workloads.aggregation import heavy_compute, partition, thread_executor
from tests.mocks import UnreachableRecordStore


def ctx(name="test", variant="baseline"):
    return RunContext(name, variant, MemoryProbe(settle_ms=0))


class TestBatchedAccess:

    def test_example_two_owners(self, store):
        workload = BatchedAccessWorkload(store)
        data = IdentifierInput((1, 2, 3))
        assert workload.baseline(data, ctx()) == 2
        assert workload.optimized(data, ctx()) == 2

    def test_call_counts(self, store):
        workload = BatchedAccessWorkload(store)
        data = IdentifierInput((1, 2, 3, 4))
        workload.baseline(data, ctx())
        assert store.calls_to("find_by_owner_id") == [1, 2, 3, 4]
        workload.optimized(data, ctx())
        assert store.calls_to("find_by_owner_id_in") == [(1, 2, 3, 4)]

    def test_groupings_match(self, store):
        workload = BatchedAccessWorkload(store)
        data = IdentifierInput((2, 1, 5, 1))
        per_item = workload.group_per_item(data, ctx())
        batched = workload.group_batched(data, ctx())
        assert set(per_item) == set(batched) == {1, 2}
        for owner in per_item:
            assert sorted(i.id for i in per_item[owner]) == sorted(i.id for i in batched[owner])

    def test_empty_input_makes_no_store_call(self, store):
        workload = BatchedAccessWorkload(store)
        assert workload.baseline(IdentifierInput(()), ctx()) == 0
        assert workload.optimized(IdentifierInput(()), ctx()) == 0
        assert store.calls == []

    def test_unknown_ids_count_zero(self, store):
        workload = BatchedAccessWorkload(store)
        data = IdentifierInput((999,))
        assert workload.baseline(data, ctx()) == 0
        assert workload.optimized(data, ctx()) == 0

    def test_store_failure_propagates(self):
        workload = BatchedAccessWorkload(UnreachableRecordStore())
        with pytest.raises(CollaboratorFailureError):
            workload.baseline(IdentifierInput((1,)), ctx())
        with pytest.raises(CollaboratorFailureError):
            workload.optimized(IdentifierInput((1,)), ctx())

    def test_cancelled_baseline_stops(self, store):
        workload = BatchedAccessWorkload(store)
        context = ctx()
        context.cancel()
        with pytest.raises(RunCancelledError):
            workload.baseline(IdentifierInput((1, 2)), context)
        assert store.calls == []


class TestRetention:

    def test_summary(self):
        workload = RetentionWorkload(buffer_length=16)
        assert workload.baseline(SizeInput(10), ctx()) == 160
        assert workload.optimized(SizeInput(10), ctx()) == 160

    def test_baseline_retains_until_release(self):
        workload = RetentionWorkload(buffer_length=8)
        context = ctx()
        workload.baseline(SizeInput(5), context)
        assert context.retained_count == 5
        context.release()
        assert context.retained_count == 0

    def test_optimized_retains_nothing(self):
        context = ctx()
        RetentionWorkload(buffer_length=8).optimized(SizeInput(5), context)
        assert context.retained_count == 0

    def test_size_zero(self):
        workload = RetentionWorkload()
        assert workload.baseline(SizeInput(0), ctx()) == 0
        assert workload.optimized(SizeInput(0), ctx()) == 0

    def test_invalid_buffer_length(self):
        with pytest.raises(ValueError):
            RetentionWorkload(buffer_length=0)


class TestLookup:

    def test_target_present(self):
        data = LookupInput(size=100000, target=99999, repeats=500)
        workload = LookupWorkload()
        assert workload.optimized(data, ctx()) == 500

    @pytest.mark.slow
    def test_target_present_baseline_full_size(self):
        data = LookupInput(size=100000, target=99999, repeats=500)
        assert LookupWorkload().baseline(data, ctx()) == 500

    def test_target_absent(self):
        data = LookupInput(size=100000, target=100000, repeats=5)
        workload = LookupWorkload()
        assert workload.baseline(data, ctx()) == 0
        assert workload.optimized(data, ctx()) == 0

    def test_baseline_matches_optimized(self):
        data = LookupInput(size=1000, target=999, repeats=50)
        workload = LookupWorkload()
        assert workload.baseline(data, ctx()) == workload.optimized(data, ctx()) == 50

    def test_negative_target_and_empty(self):
        workload = LookupWorkload()
        assert workload.baseline(LookupInput(10, -1, 3), ctx()) == 0
        assert workload.optimized(LookupInput(0, 0, 3), ctx()) == 0


class TestIteration:

    def test_size_ten(self):
        workload = IterationWorkload()
        assert workload.baseline(SizeInput(10), ctx()) == 10
        assert workload.optimized(SizeInput(10), ctx()) == 10

    def test_size_zero(self):
        assert IterationWorkload().baseline(SizeInput(0), ctx()) == 0


class TestPrefetch:

    def test_counts_resolved_records(self, store):
        workload = PrefetchWorkload(store, RecordCache())
        data = IdentifierInput((1, 2, 999, 1))
        assert workload.baseline(data, ctx()) == 3
        assert workload.optimized(data, ctx()) == 3

    def test_baseline_ignores_cache(self, store):
        cache = RecordCache()
        workload = PrefetchWorkload(store, cache)
        workload.baseline(IdentifierInput((1, 2)), ctx())
        assert len(cache) == 0
        assert store.calls_to("find_by_id") == [1, 2]

    def test_optimized_fetches_missing_once(self, store):
        workload = PrefetchWorkload(store, RecordCache())
        workload.optimized(IdentifierInput((3, 1, 3)), ctx())
        assert store.calls_to("find_all_by_ids") == [(3, 1)]

        workload.optimized(IdentifierInput((1, 3, 4)), ctx())
        assert store.calls_to("find_all_by_ids") == [(3, 1), (4,)]

    def test_fully_cached_run_makes_no_store_call(self, store):
        cache = RecordCache()
        PrefetchWorkload(store, cache).optimized(IdentifierInput((1, 2)), ctx())

        unreachable = UnreachableRecordStore()
        second = PrefetchWorkload(unreachable, cache)
        assert second.optimized(IdentifierInput((1, 2)), ctx()) == 2
        assert unreachable.attempts == 0

    def test_unknown_ids_are_not_cached(self, store):
        cache = RecordCache()
        workload = PrefetchWorkload(store, cache)
        assert workload.optimized(IdentifierInput((999,)), ctx()) == 0
        assert workload.optimized(IdentifierInput((999,)), ctx()) == 0
        assert len(cache) == 0
        assert store.calls_to("find_all_by_ids") == [(999,), (999,)]

    def test_empty_input(self, store):
        workload = PrefetchWorkload(store, RecordCache())
        assert workload.optimized(IdentifierInput(()), ctx()) == 0
        assert store.calls == []


class TestAggregation:

    def test_heavy_compute(self):
        assert heavy_compute(0) == sum(k % 7 for k in range(1000))

    def test_partition_covers_range(self):
        ranges = partition(10, 3)
        assert ranges == [(0, 4), (4, 7), (7, 10)]

    def test_partition_more_chunks_than_items(self):
        assert partition(2, 8) == [(0, 1), (1, 2)]

    def test_partition_empty(self):
        assert partition(0, 4) == []

    def test_thread_pool_matches_sequential(self):
        workload = AggregationWorkload(max_workers=3, chunks=5, executor_factory=thread_executor)
        data = SizeInput(200)
        assert workload.optimized(data, ctx()) == workload.baseline(data, ctx())

    def test_process_pool_matches_sequential(self):
        workload = AggregationWorkload(max_workers=2, chunks_per_worker=2)
        data = SizeInput(100)
        assert workload.optimized(data, ctx()) == workload.baseline(data, ctx())

    def test_size_zero_creates_no_pool(self):
        created = []

        def factory(workers):
            created.append(workers)
            return thread_executor(workers)

        workload = AggregationWorkload(max_workers=2, executor_factory=factory)
        assert workload.optimized(SizeInput(0), ctx()) == 0
        assert created == []

    def test_cancelled_before_start(self):
        workload = AggregationWorkload(max_workers=2, executor_factory=thread_executor)
        context = ctx("parallel", "optimized")
        context.cancel()
        with pytest.raises(RunCancelledError):
            workload.optimized(SizeInput(100), context)


class TestRegistry:

    def test_build_registry_names(self, store, test_config):
        registry = build_registry(store, RecordCache(), test_config)
        assert registry.names() == ["nplus1", "memory", "lookup", "stream", "cache", "parallel"]
        assert len(registry) == 6

    def test_unknown_workload(self, store, test_config):
        registry = build_registry(store, RecordCache(), test_config)
        with pytest.raises(UnknownWorkloadError) as exc_info:
            registry.get("fibonacci")
        assert exc_info.value.context["available"] == registry.names()

    def test_duplicate_registration(self):
        registry = WorkloadRegistry([LookupWorkload()])
        with pytest.raises(ValueError):
            registry.register(LookupWorkload())

    def test_only_memory_measures_memory(self, store, test_config):
        registry = build_registry(store, RecordCache(), test_config)
        assert [w.name for w in registry if w.measures_memory] == ["memory"]
