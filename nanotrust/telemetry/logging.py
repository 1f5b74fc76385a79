"""
nanotrust — Structured Logging

All logging via structlog, rendered through the standard library so that
library loggers share one handler. Every nanotrust event carries the
subsystem it came from; retrieval events additionally carry the artifact
code being resolved, bound through context variables so that parsing and
self-certification logs emitted on its behalf are attributable.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.typing import EventDict, WrappedLogger

if TYPE_CHECKING:
    from nanotrust.config import LoggingConfig

_QUIET_LIBRARIES = ("httpx", "httpcore", "rdflib")


def add_subsystem(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """``nanotrust.systems.security.signer`` -> ``subsystem="security"``."""
    parts = str(event_dict.get("logger", "")).split(".")
    if parts[0] != "nanotrust" or len(parts) < 2:
        return event_dict
    if parts[1] == "systems" and len(parts) > 2:
        event_dict.setdefault("subsystem", parts[2])
    else:
        event_dict.setdefault("subsystem", parts[1])
    return event_dict


@contextmanager
def retrieval_context(artifact_code: str) -> Iterator[None]:
    """Attach ``artifact_code`` to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(artifact_code=artifact_code):
        yield


def setup_logging(config: LoggingConfig, *, stream: Any = None) -> None:
    """
    Configure structured logging for nanotrust and the libraries it drives.

    ``stream`` defaults to stdout; console output is colored only on a TTY.
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_subsystem,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: Any
    if config.format == "json":
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream is None and sys.stdout.isatty())

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
