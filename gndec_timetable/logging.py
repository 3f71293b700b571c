"""Structured logging for scrape runs.

Library modules only call get_logger(); the CLI calls setup_logging() once.
Everything is written to stderr so that stdout carries nothing but command
output (group ids, current/next lines, export summaries).
"""

import logging
import sys
from typing import IO, List, Optional

import structlog


def _processors(json_output: bool) -> List:
    chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info if json_output else structlog.dev.set_exc_info,
    ]
    chain.append(
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return chain


def setup_logging(
    json_output: bool = False,
    log_level: str = "INFO",
    stream: Optional[IO[str]] = None,
) -> None:
    """Route structlog events and stdlib records (requests, urllib3) to one stream.

    Args:
        json_output: JSON lines for scheduled runs, console lines otherwise.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        stream: Destination; defaults to sys.stderr.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    out = stream if stream is not None else sys.stderr

    structlog.configure(
        processors=_processors(json_output),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", stream=out, level=level, force=True)
    # urllib3 logs every connection at DEBUG; keep it to warnings unless asked
    if level > logging.DEBUG:
        logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger bound to a module name (pass __name__)."""
    return structlog.get_logger(name)
