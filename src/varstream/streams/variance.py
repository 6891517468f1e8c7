from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import TYPE_CHECKING

import structlog

from varstream.stats.accumulator import (
    AccumulatorState,
    VarianceAccumulator,
    validate_count,
    validate_mean,
    validate_sum_sq_dev,
)
from varstream.streams.base import MapStage, Pipeline, ReduceStage
from varstream.streams.transform import TransformStream

if TYPE_CHECKING:
    from varstream.config import Settings

logger = structlog.get_logger(__name__)


def accumulate(accumulator: VarianceAccumulator, value: float) -> None:
    accumulator.update(value)


def snapshot(accumulator: VarianceAccumulator) -> AccumulatorState:
    return accumulator.snapshot()


def derive_variance(state: AccumulatorState) -> float:
    return state.variance


def has_variance(state: AccumulatorState) -> bool:
    return not state.is_degenerate


class VarianceStream:
    """Configurable factory for running sample variance transform streams.

    The initial value (sum of squared deviations), mean and number of values
    describe observations absorbed before streaming starts. Each call to
    stream() copies the current configuration into a fresh accumulator, so
    changing it later only affects streams created afterwards. A positive
    value with fewer than two values is rejected when stream() is called.
    """

    def __init__(self) -> None:
        self._value = 0.0
        self._mean = 0.0
        self._num_values = 0

    def get_value(self) -> float:
        return self._value

    def set_value(self, value: float) -> VarianceStream:
        self._value = validate_sum_sq_dev(value)
        return self

    def get_mean(self) -> float:
        return self._mean

    def set_mean(self, value: float) -> VarianceStream:
        self._mean = validate_mean(value)
        return self

    def get_num_values(self) -> int:
        return self._num_values

    def set_num_values(self, value: int) -> VarianceStream:
        self._num_values = validate_count(value)
        return self

    def initial_state(self) -> AccumulatorState:
        return AccumulatorState(
            count=self._num_values,
            mean=self._mean,
            sum_sq_dev=self._value,
        )

    def pipeline(self) -> Pipeline:
        reduce_stage: ReduceStage[float, AccumulatorState] = ReduceStage(
            VarianceAccumulator.from_state(self.initial_state()),
            accumulate,
            snapshot,
        )
        map_stage: MapStage[AccumulatorState, float] = MapStage(
            derive_variance, predicate=has_variance
        )
        return Pipeline(reduce_stage, map_stage)

    def stream(self) -> TransformStream:
        logger.debug(
            "Creating variance stream",
            num_values=self._num_values,
            mean=self._mean,
            value=self._value,
        )
        return TransformStream(self.pipeline(), name="variance")

    def __repr__(self) -> str:
        return (
            f"VarianceStream(value={self._value!r}, mean={self._mean!r}, "
            f"num_values={self._num_values})"
        )


def create_stream(settings: Settings | None = None) -> VarianceStream:
    stream = VarianceStream()
    if settings is not None:
        stream.set_num_values(settings.initial_count)
        stream.set_mean(settings.initial_mean)
        stream.set_value(settings.initial_sum_sq_dev)
    return stream


def running_variance(
    values: Iterable[float],
    *,
    count: int = 0,
    mean: float = 0.0,
    sum_sq_dev: float = 0.0,
) -> Iterator[float]:
    config = VarianceStream().set_num_values(count).set_mean(mean).set_value(sum_sq_dev)
    return config.pipeline().process(values)


def arunning_variance(
    values: AsyncIterable[float],
    *,
    count: int = 0,
    mean: float = 0.0,
    sum_sq_dev: float = 0.0,
) -> AsyncIterator[float]:
    config = VarianceStream().set_num_values(count).set_mean(mean).set_value(sum_sq_dev)
    return config.pipeline().aprocess(values)
