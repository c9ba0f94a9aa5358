"""structlog configuration for the CLI.

Library code only holds lazy loggers from ``structlog.get_logger``, so
nothing is fixed until the CLI entry point calls ``configure_logging``.
"""

from __future__ import annotations

import logging
import sys

import structlog


def _stderr_logger(*args) -> structlog.PrintLogger:
    # Resolve sys.stderr per logger so swapped streams (tests, pipes) are honoured.
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(verbose: bool = False, json_logs: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING

    processors: list = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
