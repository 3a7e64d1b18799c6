"""
Structured Logging with structlog

Library modules only call get_logger(); the driving tool decides how output
is rendered by calling setup_logging() once.
"""

import logging
import sys
from typing import TYPE_CHECKING, Literal

import structlog
from structlog.contextvars import merge_contextvars

if TYPE_CHECKING:
    from codegraph_source.config import SourceSettings


def setup_logging(level: str = "INFO", format: Literal["json", "console"] = "console") -> None:
    """
    Route library events (source_processed, backend_registered, ...) to stderr.

    Args:
        level: Logging level name
        format: "json" for log pipelines, "console" for a terminal
    """
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=getattr(logging, level.upper(), logging.INFO))

    processors = [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if format == "json":
        processors.extend([structlog.processors.format_exc_info, structlog.processors.JSONRenderer()])
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_settings(settings: "SourceSettings") -> None:
    """Configure logging from SourceSettings."""
    setup_logging(level=settings.log_level, format=settings.log_format)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__ from calling module)

    Example:
        ```python
        logger = get_logger(__name__)
        logger.debug("source_processed", path="app.py", tokens=42)
        ```
    """
    return structlog.get_logger(name)
