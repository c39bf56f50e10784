"""Configures structlog for command line use."""

import logging
import sys

import structlog


def configure_logging(debug: bool = False) -> None:
    """Send structured logs to stderr so they do not interleave with prompts on stdout.

    Only warnings and errors are shown unless debug is set.
    """
    level = logging.DEBUG if debug else logging.WARNING
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
