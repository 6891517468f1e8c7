from __future__ import annotations

import logging
import sys

import structlog

from varstream.config import get_settings


def configure_logging(log_level: str | None = None) -> str:
    """Install the structlog console pipeline and route stdlib logging through it.

    Falls back to ``Settings.log_level`` (``VARSTREAM_LOG_LEVEL``) when no level
    is given. Returns the level name that was applied.
    """
    level_name = (log_level or get_settings().log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name!r}")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("varstream").setLevel(level)
    return level_name
