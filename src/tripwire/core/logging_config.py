"""Structured logging configuration using structlog.

tripwire modules log through stdlib ``logging``; ``setup_logging`` renders
those records (including any ``extra=`` fields, such as the ones
``LoggingTripHandler`` attaches) as JSON lines or coloured console output.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from tripwire.core.config import ObservabilityConfig


def _renderer(log_format: str, stream: TextIO) -> structlog.types.Processor:
    if log_format == "auto":
        log_format = "console" if stream.isatty() else "json"
    if log_format == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(config: ObservabilityConfig, stream: TextIO | None = None) -> None:
    """Route stdlib logging through structlog's formatter.

    Args:
        config: Level and output format. ``log_format="auto"`` picks the
            console renderer on a TTY and JSON otherwise.
        stream: Where records go. Defaults to stderr.
    """
    stream = stream or sys.stderr
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        # stdlib records only: lift ``extra=`` fields into the event dict
        foreign_pre_chain=[*shared_processors, structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(config.log_format, stream),
        ],
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("tripwire").setLevel(level)
