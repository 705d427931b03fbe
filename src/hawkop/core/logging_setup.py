"""
Logging setup - structlog configuration for the CLI process.

Log events go to stderr so that --format json output on stdout stays
machine readable.
"""

import logging
import sys

import structlog


def _stderr_logger(*args) -> structlog.PrintLogger:
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(verbose: bool = False):
    """
    Configure structlog once per process.

    Args:
        verbose: Emit debug events (default shows warnings and above)
    """
    level = logging.DEBUG if verbose else logging.WARNING

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        # Resolved per logger so a swapped sys.stderr (tests, pipes) is honoured
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
