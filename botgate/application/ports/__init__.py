"""Application ports (interfaces) for botgate.

Ports define the boundaries between the throttle core and its
collaborators: the time source, the counter store backend, the outbound
transport and the warning notification.
"""

from botgate.application.ports.clock import ClockProtocol
from botgate.application.ports.counter_store import CounterStorePort, WindowTransition
from botgate.application.ports.message_sender import MessageSenderPort
from botgate.application.ports.warning_action import (
    DEFAULT_WARNING_TEXT,
    WarningAction,
    default_warning_action,
)

__all__: list[str] = [
    "DEFAULT_WARNING_TEXT",
    "ClockProtocol",
    "CounterStorePort",
    "MessageSenderPort",
    "WarningAction",
    "WindowTransition",
    "default_warning_action",
]
