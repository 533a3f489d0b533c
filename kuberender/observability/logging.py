"""Structured logging configuration using structlog.

Log lines always go to stderr: stdout belongs to the rendered YAML stream.
"""

from __future__ import annotations

import logging
import sys
from typing import Literal

import structlog

LogFormat = Literal["json", "console"]


def setup_logging(level: str = "info", fmt: LogFormat = "json") -> None:
    """Configure structlog.

    ``fmt="json"`` emits one JSON object per line for machine consumption;
    ``fmt="console"`` emits the human-readable structlog dev format used by
    the CLI when attached to a terminal.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    renderer: structlog.typing.Processor
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def _stderr_logger(*_args: object) -> structlog.PrintLogger:
    # Looked up per call so a redirected sys.stderr (CliRunner, pytest capture) is honoured.
    return structlog.PrintLogger(file=sys.stderr)


def get_logger(component: str, **context: object) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name and optional extra context."""
    return structlog.get_logger(component=component, **context)  # type: ignore[return-value]
