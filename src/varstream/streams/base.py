from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator
from typing import Any, Generic, TypeVar

InT = TypeVar("InT")
OutT = TypeVar("OutT")
AccT = TypeVar("AccT")


class Stage(ABC, Generic[InT, OutT]):
    """A unit that receives one item at a time and emits zero or more items.

    Output order always follows input order. Stateful stages are not
    restartable; create a fresh instance for each sequence.
    """

    @abstractmethod
    def feed(self, item: InT) -> list[OutT]:
        pass

    def process(self, items: Iterable[InT]) -> Iterator[OutT]:
        for item in items:
            yield from self.feed(item)

    async def aprocess(self, items: AsyncIterable[InT]) -> AsyncIterator[OutT]:
        async for item in items:
            for out in self.feed(item):
                yield out


class ReduceStage(Stage[InT, AccT]):
    """Folds each item into an owned accumulator and emits a snapshot of it."""

    def __init__(
        self,
        accumulator: Any,
        reducer: Callable[[Any, InT], None],
        snapshot: Callable[[Any], AccT],
    ) -> None:
        self._accumulator = accumulator
        self._reducer = reducer
        self._snapshot = snapshot

    @property
    def accumulator(self) -> Any:
        return self._accumulator

    def feed(self, item: InT) -> list[AccT]:
        self._reducer(self._accumulator, item)
        return [self._snapshot(self._accumulator)]


class MapStage(Stage[InT, OutT]):
    def __init__(
        self,
        transform: Callable[[InT], OutT],
        predicate: Callable[[InT], bool] | None = None,
    ) -> None:
        self._transform = transform
        self._predicate = predicate

    def feed(self, item: InT) -> list[OutT]:
        if self._predicate is not None and not self._predicate(item):
            return []
        return [self._transform(item)]


class Pipeline(Stage[Any, Any]):
    """Connects stages so each stage's output is the next stage's input."""

    def __init__(self, *stages: Stage[Any, Any]) -> None:
        if not stages:
            raise ValueError("Pipeline requires at least one stage")
        self._stages = stages

    @property
    def stages(self) -> tuple[Stage[Any, Any], ...]:
        return self._stages

    def feed(self, item: Any) -> list[Any]:
        items = [item]
        for stage in self._stages:
            items = [out for current in items for out in stage.feed(current)]
            if not items:
                break
        return items
