from __future__ import annotations

import math
import numbers
import sys
from dataclasses import dataclass

from varstream.stats.exceptions import (
    AccumulatorStateError,
    DegenerateVarianceError,
    InvalidArgumentError,
)


def _check_real(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError(name, value)
    try:
        result = float(value)
    except OverflowError as e:
        raise InvalidArgumentError(name, value, "is too large to represent as a float") from e
    if math.isnan(result):
        raise InvalidArgumentError(name, value, "must not be NaN")
    if math.isinf(result):
        raise InvalidArgumentError(name, value, "must be finite")
    return result


def validate_count(value: object) -> int:
    # Integers are kept exact; only non-integral reals go through float
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        count = int(value)
        if count < 0:
            raise InvalidArgumentError("count", value, "must be non-negative")
        if count > sys.float_info.max:
            raise InvalidArgumentError("count", value, "is too large to represent as a float")
        return count
    result = _check_real("count", value)
    if not result.is_integer():
        raise InvalidArgumentError("count", value, "must be integral")
    if result < 0:
        raise InvalidArgumentError("count", value, "must be non-negative")
    return int(result)


def validate_mean(value: object) -> float:
    return _check_real("mean", value)


def validate_sum_sq_dev(value: object) -> float:
    result = _check_real("sum_sq_dev", value)
    if result < 0:
        raise InvalidArgumentError("sum_sq_dev", value, "must be non-negative")
    return result


def validate_observation(value: object) -> float:
    return _check_real("value", value)


def validate_seed(count: int, sum_sq_dev: float) -> None:
    if count < 2 and sum_sq_dev > 0:
        raise InvalidArgumentError(
            "sum_sq_dev",
            sum_sq_dev,
            f"must be 0 when seeded with {count} observation(s)",
        )


@dataclass(frozen=True)
class AccumulatorState:
    """Point-in-time copy of an accumulator's count, mean and M2 term."""

    count: int
    mean: float
    sum_sq_dev: float

    @property
    def is_degenerate(self) -> bool:
        return self.count < 2

    @property
    def variance(self) -> float:
        if self.is_degenerate:
            raise DegenerateVarianceError(self.count)
        # M2 can drift fractionally below zero on near-constant input
        return max(self.sum_sq_dev, 0.0) / (self.count - 1)


class VarianceAccumulator:
    """Running sample variance using Welford's algorithm.

    Holds only the observation count, the running mean and the running sum of
    squared deviations (M2). The state may be seeded to resume a prior partial
    computation, but only before the first update of a lifecycle.
    """

    def __init__(self, count: int = 0, mean: float = 0.0, sum_sq_dev: float = 0.0) -> None:
        self.count = validate_count(count)
        self.mean = validate_mean(mean)
        self.sum_sq_dev = validate_sum_sq_dev(sum_sq_dev)
        validate_seed(self.count, self.sum_sq_dev)
        self._updates = 0

    @classmethod
    def from_state(cls, state: AccumulatorState) -> VarianceAccumulator:
        return cls(count=state.count, mean=state.mean, sum_sq_dev=state.sum_sq_dev)

    @property
    def updates(self) -> int:
        return self._updates

    def seed(
        self,
        count: int | None = None,
        mean: float | None = None,
        sum_sq_dev: float | None = None,
    ) -> None:
        if self._updates:
            raise AccumulatorStateError(
                f"Cannot seed after {self._updates} update(s); call reset() first"
            )
        # All arguments are validated before any field changes
        new_count = self.count if count is None else validate_count(count)
        new_mean = self.mean if mean is None else validate_mean(mean)
        new_sum_sq_dev = self.sum_sq_dev if sum_sq_dev is None else validate_sum_sq_dev(sum_sq_dev)
        validate_seed(new_count, new_sum_sq_dev)
        self.count = new_count
        self.mean = new_mean
        self.sum_sq_dev = new_sum_sq_dev

    def reset(self) -> None:
        self.count = 0
        self.mean = 0.0
        self.sum_sq_dev = 0.0
        self._updates = 0

    def update(self, value: float) -> None:
        x = validate_observation(value)
        self.count += 1
        delta = x - self.mean
        self.mean += delta / self.count
        self.sum_sq_dev += delta * (x - self.mean)
        self._updates += 1

    def variance(self) -> float:
        return self.snapshot().variance

    def snapshot(self) -> AccumulatorState:
        return AccumulatorState(count=self.count, mean=self.mean, sum_sq_dev=self.sum_sq_dev)

    def __repr__(self) -> str:
        return (
            f"VarianceAccumulator(count={self.count}, mean={self.mean!r}, "
            f"sum_sq_dev={self.sum_sq_dev!r})"
        )
