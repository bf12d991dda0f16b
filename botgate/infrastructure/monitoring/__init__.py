"""Operational metrics for botgate."""

from botgate.infrastructure.monitoring.metrics import (
    METRICS_CONTENT_TYPE,
    ThrottleMetrics,
    generate_metrics,
    get_throttle_metrics,
    reset_throttle_metrics,
)

__all__: list[str] = [
    "METRICS_CONTENT_TYPE",
    "ThrottleMetrics",
    "generate_metrics",
    "get_throttle_metrics",
    "reset_throttle_metrics",
]
