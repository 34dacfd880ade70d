"""
Centralized logging configuration for eventgallery.

Every component logs through structlog with snake_case event names. The
Streamlit shell and the batch import task both call
``configure_structured_logging`` once at startup and bind the context that
identifies the running process (component, storage backend), so each event
from the photo pipeline carries it.
"""

import logging
import os
import sys
from typing import Any

import structlog

# Logger names for the shared channels
PERFORMANCE_LOGGER = "eventgallery.performance"
ERROR_LOGGER = "eventgallery.errors"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level() -> int:
    """
    Get log level from the LOG_LEVEL environment variable, INFO by default.

    Returns:
        int: Log level constant from logging module
    """
    return LOG_LEVELS.get(os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)


def is_development_environment() -> bool:
    """Check if running in development environment."""
    return os.getenv("ENVIRONMENT", "development").lower() in ["development", "dev", "local"]


def build_renderer(is_dev: bool, use_colors: bool) -> Any:
    """
    Pick the final processor of the chain.

    Development gets the human-readable console format, colored only when
    stderr is a terminal. Everything else gets one JSON object per line.
    """
    if is_dev:
        return structlog.dev.ConsoleRenderer(colors=use_colors)
    return structlog.processors.JSONRenderer(ensure_ascii=False)


def build_processors(is_dev: bool, use_colors: bool) -> list[Any]:
    """Build the structlog processor chain."""
    return [
        # Context bound for the whole process (component, storage backend)
        structlog.contextvars.merge_contextvars,
        # Filter by log level
        structlog.stdlib.filter_by_level,
        # Add logger name and level
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        # Add stack info and format exceptions
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        build_renderer(is_dev, use_colors),
    ]


def bind_log_context(**context: Any) -> None:
    """Attach context to every later log event of this process."""
    structlog.contextvars.bind_contextvars(**context)


def configure_structured_logging(**context: Any) -> None:
    """
    Configure structured logging for the entire application.

    Args:
        **context: Process-wide context bound to every event,
            e.g. ``component="viewer", storage_backend="duckdb"``
    """
    # Determine environment settings
    log_level = get_log_level()
    is_dev = is_development_environment()
    use_colors = is_dev and sys.stderr.isatty()

    # structlog renders the message, stdlib only routes it to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=sys.stderr,
    )

    structlog.configure(
        processors=build_processors(is_dev, use_colors),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Set up root logger
    logging.getLogger().setLevel(log_level)

    if context:
        bind_log_context(**context)

    # Log configuration info
    structlog.get_logger("eventgallery.logging").info(
        "logging_configured",
        log_level=logging.getLevelName(log_level),
        environment="development" if is_dev else "production",
        colors_enabled=use_colors,
    )


def get_logger(name: str | None = None) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (optional, defaults to calling module)

    Returns:
        structlog.BoundLogger: Configured logger instance
    """
    if name is None:
        # Get the calling module name
        import inspect

        frame = inspect.currentframe()
        if frame and frame.f_back:
            name = frame.f_back.f_globals.get("__name__", "unknown")

    return structlog.get_logger(name)


def log_performance(operation: str, duration: float, **context: Any) -> None:
    """
    Log how long a pipeline stage took.

    Args:
        operation: Stage name, e.g. "transcode" or "ingest_files"
        duration: Duration in seconds
        **context: Additional context information
    """
    get_logger(PERFORMANCE_LOGGER).info("performance_metric", operation=operation, duration_seconds=duration, **context)


def log_error(error: Exception, context: dict[str, Any] | None = None) -> None:
    """
    Log a gallery error with its classification.

    Args:
        error: Exception that occurred
        context: Category, code and details of the error
    """
    error_context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    # Classification fields go last so they win over the generic ones
    if context:
        error_context.update(context)

    get_logger(ERROR_LOGGER).error("error_occurred", **error_context)
