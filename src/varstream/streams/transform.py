from __future__ import annotations

import enum
from collections.abc import AsyncIterable, Callable, Iterable
from typing import Any, Literal

import structlog

from varstream.stats.exceptions import StreamClosedError
from varstream.streams.base import Stage

logger = structlog.get_logger(__name__)

Event = Literal["data", "end", "error"]


class StreamStatus(enum.Enum):
    OPEN = "open"
    ENDED = "ended"
    ERRORED = "errored"


class TransformStream:
    """Push-based wrapper around a stage.

    Items go in through write(), results come out through "data" handlers,
    end() propagates end-of-stream to "end" handlers and any failure is
    delivered unchanged to "error" handlers. Both ended and errored are
    terminal.

    Exceptions raised by a "data" handler are not stage failures: they
    propagate out of write() (and the pipe_from/consume drivers) and leave
    the stream open.
    """

    def __init__(self, stage: Stage[Any, Any], name: str = "transform") -> None:
        self._stage = stage
        self._name = name
        self._status = StreamStatus.OPEN
        self._error: BaseException | None = None
        self._handlers: dict[str, list[Callable[..., None]]] = {
            "data": [],
            "end": [],
            "error": [],
        }

    @property
    def name(self) -> str:
        return self._name

    @property
    def status(self) -> StreamStatus:
        return self._status

    @property
    def error(self) -> BaseException | None:
        return self._error

    @property
    def writable(self) -> bool:
        return self._status is StreamStatus.OPEN

    def on(self, event: Event, handler: Callable[..., None]) -> TransformStream:
        if event not in self._handlers:
            raise ValueError(f"Unknown stream event: {event!r}")
        self._handlers[event].append(handler)
        return self

    def write(self, item: Any) -> bool:
        if self._status is not StreamStatus.OPEN:
            raise StreamClosedError(f"Cannot write to {self._status.value} stream {self._name!r}")
        try:
            outputs = self._stage.feed(item)
        except Exception as e:
            self.fail(e)
            return False
        for out in outputs:
            for handler in self._handlers["data"]:
                handler(out)
        return True

    def end(self) -> None:
        if self._status is StreamStatus.ENDED:
            return
        if self._status is StreamStatus.ERRORED:
            raise StreamClosedError(f"Cannot end errored stream {self._name!r}")
        self._status = StreamStatus.ENDED
        logger.debug("Stream ended", stream=self._name)
        for handler in self._handlers["end"]:
            handler()

    def fail(self, error: BaseException) -> None:
        if self._status is not StreamStatus.OPEN:
            logger.warning(
                "Ignoring error on closed stream",
                stream=self._name,
                status=self._status.value,
                error=str(error),
            )
            return
        self._status = StreamStatus.ERRORED
        self._error = error
        handlers = self._handlers["error"]
        if not handlers:
            logger.error(
                "Unhandled stream error",
                stream=self._name,
                error_type=type(error).__name__,
                error=str(error),
            )
            return
        logger.debug("Stream errored", stream=self._name, error_type=type(error).__name__)
        for handler in handlers:
            handler(error)

    def pipe_from(self, source: Iterable[Any]) -> TransformStream:
        """Drain an upstream iterable into this stream, then end it.

        Errors raised while iterating the source are routed to the error
        channel; no further items are written afterwards.
        """
        iterator = iter(source)
        while self.writable:
            try:
                item = next(iterator)
            except StopIteration:
                self.end()
                break
            except Exception as e:
                self.fail(e)
                break
            self.write(item)
        return self

    async def consume(self, source: AsyncIterable[Any]) -> TransformStream:
        iterator = source.__aiter__()
        while self.writable:
            try:
                item = await iterator.__anext__()
            except StopAsyncIteration:
                self.end()
                break
            except Exception as e:
                self.fail(e)
                break
            self.write(item)
        return self

    def __repr__(self) -> str:
        return f"TransformStream(name={self._name!r}, status={self._status.value!r})"
