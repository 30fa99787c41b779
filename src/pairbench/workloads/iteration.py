"""
Side-Effecting vs Pure Iteration
================================
The baseline pushes every element through a lazy pipeline whose peek stage
mutates an outer list. The optimized variant fills the list in a plain loop.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, TypeVar

from pairbench.core.context import RunContext
from pairbench.core.inputs import SizeInput
from .base import WorkloadPair


T = TypeVar("T")


def _peek(iterable: Iterable[T], action: Callable[[T], None]) -> Iterator[T]:
    for item in iterable:
        action(item)
        yield item


class IterationWorkload(WorkloadPair):
    name = "stream"
    title = "Side-effecting vs pure iteration"
    input_type = SizeInput

    def baseline(self, data: SizeInput, context: RunContext) -> int:
        accumulator: List[int] = []
        pipeline = (x for x in _peek(range(data.size), accumulator.append))
        for _ in pipeline:
            pass
        return len(accumulator)

    def optimized(self, data: SizeInput, context: RunContext) -> int:
        accumulator: List[int] = []
        for i in range(data.size):
            accumulator.append(i)
        return len(accumulator)


__all__ = ["IterationWorkload"]
