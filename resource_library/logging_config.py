"""Structured logging for the resource library.

All records, structlog and stdlib alike, leave through one stdout handler on
the root logger.  Production renders JSON lines; ``debug`` switches to the
console renderer.  ``ResourceLibrary.rebuild`` binds ``owner``/``repo`` with
``structlog.contextvars`` so every GitHub call logged during a rebuild carries
the repository it belongs to.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable

import structlog

# Per-request client chatter; catalog events already log each GitHub call.
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")


def _pre_chain(json_logs: bool) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        # The console renderer pretty-prints exc_info itself.
        chain.append(structlog.processors.format_exc_info)
    return chain


def _stdout_handler(renderer: structlog.types.Processor) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(
    *,
    json_logs: bool = True,
    log_level: str = "INFO",
    quiet: Iterable[str] = QUIET_LOGGERS,
) -> None:
    """Route structlog through the stdlib root logger.

    Args:
        json_logs: JSON lines when *True*, human-readable console output otherwise.
        log_level: Root level name, case-insensitive (``"info"``, ``"DEBUG"``...).
        quiet: Logger names capped at WARNING regardless of *log_level*.
    """
    structlog.configure(
        processors=[
            *_pre_chain(json_logs),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )

    root = logging.getLogger()
    root.handlers[:] = [_stdout_handler(renderer)]
    root.setLevel(log_level.upper())

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
