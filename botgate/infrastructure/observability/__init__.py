"""Observability infrastructure for structured logging and correlation.

Usage:
    from botgate.infrastructure.observability import (
        configure_structlog,
        get_correlation_id,
        set_correlation_id,
    )
"""

from botgate.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from botgate.infrastructure.observability.logging import configure_structlog

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]
