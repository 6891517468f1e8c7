from varstream.stats.accumulator import AccumulatorState, VarianceAccumulator
from varstream.stats.exceptions import (
    AccumulatorStateError,
    DegenerateVarianceError,
    InvalidArgumentError,
    StreamClosedError,
    VarStreamError,
)

__all__ = [
    "AccumulatorState",
    "AccumulatorStateError",
    "DegenerateVarianceError",
    "InvalidArgumentError",
    "StreamClosedError",
    "VarStreamError",
    "VarianceAccumulator",
]
