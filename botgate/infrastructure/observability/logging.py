"""Structured logging configuration with structlog.

Supports a production mode (JSON lines for log aggregation) and a
development mode (colored console output).

Log Entry Format (production):
    {
        "timestamp": "2025-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "throttle_denied",
        "correlation_id": "...",
        "service": "ThrottleGate",
        ...additional context
    }

Usage:
    from botgate.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from botgate.infrastructure.observability.correlation import correlation_id_processor

# Environment variable for log level (default: INFO)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    """Get the configured log level from environment."""
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog for the application.

    Should be called once at startup.

    Args:
        environment: 'production' for JSON output, 'development' for console.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
