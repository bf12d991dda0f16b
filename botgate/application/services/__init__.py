"""Application services for botgate.

The throttle core:
- SystemClock: pinnable wall-clock time source
- RateWindowStateMachine: fixed-window counter per rate key
- ScopeResolver: handler node -> active quota scopes
- ThrottleGate: evaluates every scope and warns once per window

Plus the thin EventDispatcher used to drive the gate from inbound
messages.
"""

from botgate.application.services.clock_service import SystemClock
from botgate.application.services.dispatcher import EventContext, EventDispatcher
from botgate.application.services.rate_window_service import RateWindowStateMachine
from botgate.application.services.scope_resolver import ScopeResolver
from botgate.application.services.throttle_gate import ThrottleGate

__all__: list[str] = [
    "EventContext",
    "EventDispatcher",
    "RateWindowStateMachine",
    "ScopeResolver",
    "SystemClock",
    "ThrottleGate",
]
