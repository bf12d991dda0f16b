"""Warning Action Port - notification sent once to a throttled caller.

The warning action is configured when the throttle gate is built and
receives the event context plus the whole seconds left until the
governing window reopens.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from botgate.application.services.dispatcher import EventContext

DEFAULT_WARNING_TEXT = (
    "Too many messages, please wait a bit. "
    "This message will only be sent once until the rate limit is reset."
)


class WarningAction(Protocol):
    """Callable invoked at most once per denial episode."""

    async def __call__(self, context: EventContext, remaining_seconds: int) -> None:
        ...


async def default_warning_action(context: EventContext, remaining_seconds: int) -> None:
    """Reply with the fixed default warning text."""
    await context.send_message(DEFAULT_WARNING_TEXT)
