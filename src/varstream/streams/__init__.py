from varstream.streams.base import MapStage, Pipeline, ReduceStage, Stage
from varstream.streams.transform import StreamStatus, TransformStream
from varstream.streams.variance import (
    VarianceStream,
    arunning_variance,
    create_stream,
    running_variance,
)

__all__ = [
    "MapStage",
    "Pipeline",
    "ReduceStage",
    "Stage",
    "StreamStatus",
    "TransformStream",
    "VarianceStream",
    "arunning_variance",
    "create_stream",
    "running_variance",
]
