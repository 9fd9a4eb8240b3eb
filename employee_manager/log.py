"""Structured logging setup shared by the web app and the repository."""
import logging

import structlog


def configure_logging(log_level="INFO", json_logs=True):
    """Configure structlog processors, level filtering and output."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        # No file given: each logger writes to whatever sys.stdout is current
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
