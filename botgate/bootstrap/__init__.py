"""Bootstrap wiring for botgate."""

from botgate.bootstrap.throttle import (
    create_counter_store,
    create_dispatcher,
    create_throttle_gate,
)
from botgate.infrastructure.observability import configure_structlog

__all__: list[str] = [
    "configure_structlog",
    "create_counter_store",
    "create_dispatcher",
    "create_throttle_gate",
]
