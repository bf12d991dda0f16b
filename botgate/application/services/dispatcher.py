"""Event dispatcher: routes inbound text messages through the throttle gate.

The dispatcher owns the handler registration tree. For each inbound
message it finds the first handler whose text matches, asks the throttle
gate whether the chain may run, and then either runs the handler or
returns without doing anything (the gate has already warned the caller
if this denial called for it).

Store failure policy lives here, not in the gate:
- fail_open=False (default): StoreUnavailableError propagates.
- fail_open=True: the handler runs and the failure is logged.

Usage:
    dispatcher = EventDispatcher(gate=gate, sender=sender)
    dispatcher.throttle(4)
    dispatcher.on_text("start", start_handler)
    dispatcher.group(lambda g: g.on_text("hello", hello_handler).throttle(2)).throttle(3)

    await dispatcher.dispatch(message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from botgate.application.ports.message_sender import MessageSenderPort
from botgate.application.services.base import LoggingMixin
from botgate.application.services.throttle_gate import ThrottleGate
from botgate.domain.errors.rate_limit import StoreUnavailableError
from botgate.domain.models.chat import InboundMessage
from botgate.domain.models.handler_tree import (
    ApplicationNode,
    GroupNode,
    HandlerCallback,
    HandlerNode,
)
from botgate.domain.models.scope import RequesterIdentity
from botgate.infrastructure.observability.correlation import (
    generate_correlation_id,
    set_correlation_id,
)


@dataclass(frozen=True)
class EventContext:
    """Per-event context handed to handlers and warning actions.

    Attributes:
        message: The inbound message being handled.
        sender: Outbound transport used to reply.
    """

    message: InboundMessage
    sender: MessageSenderPort

    @property
    def chat_id(self) -> int | None:
        return self.message.chat.id if self.message.chat is not None else None

    @property
    def user_id(self) -> int | None:
        return self.message.user.id if self.message.user is not None else None

    @property
    def requester(self) -> RequesterIdentity:
        """Identity the event is attributed to for rate limiting."""
        return RequesterIdentity(chat_id=self.chat_id, user_id=self.user_id)

    async def send_message(self, text: str) -> None:
        """Reply in the chat the message came from."""
        await self.sender.send_message(self.chat_id, text)


class EventDispatcher(LoggingMixin):
    """Matches inbound messages to handlers and enforces throttles.

    Attributes:
        _gate: Throttle gate consulted before every handler.
        _sender: Outbound transport passed to handlers via EventContext.
        _root: Application node of the handler tree.
        _fail_open: Run handlers when the counter store is unavailable.
    """

    def __init__(
        self,
        gate: ThrottleGate,
        sender: MessageSenderPort,
        root: ApplicationNode | None = None,
        fail_open: bool = False,
    ) -> None:
        self._gate = gate
        self._sender = sender
        self._root = root or ApplicationNode()
        self._fail_open = fail_open
        self._init_logger(component="dispatcher")

    @property
    def root(self) -> ApplicationNode:
        return self._root

    def on_text(
        self, pattern: str, callback: HandlerCallback, name: str | None = None
    ) -> HandlerNode:
        """Register a top-level handler for messages equal to pattern."""
        return self._root.on_text(pattern, callback, name=name)

    def group(self, builder: Callable[[GroupNode], None], name: str | None = None) -> GroupNode:
        """Register a top-level group of handlers."""
        return self._root.group(builder, name=name)

    def throttle(self, limit: int) -> EventDispatcher:
        """Apply an application-wide quota to every handler."""
        self._root.throttle(limit)
        return self

    async def dispatch(self, message: InboundMessage) -> bool:
        """Route one inbound message.

        Args:
            message: The message to handle.

        Returns:
            True if a handler ran, False if nothing matched or the event
            was throttled.

        Raises:
            StoreUnavailableError: If the store fails and fail_open is False.
        """
        correlation_id = (
            str(message.update_id) if message.update_id is not None else generate_correlation_id()
        )
        set_correlation_id(correlation_id)
        log = self._log_operation("dispatch", text=message.text)

        handler = self._root.find_handler(message.text)
        if handler is None:
            log.debug("handler_not_matched")
            return False

        context = EventContext(message=message, sender=self._sender)
        try:
            allowed = await self._gate.guard(handler, context)
        except StoreUnavailableError as exc:
            if not self._fail_open:
                raise
            log.warning("throttle_bypassed", reason=str(exc), handler=handler.scope_id)
            allowed = True

        if not allowed:
            return False

        await handler.callback(context)
        log.debug("handler_completed", handler=handler.scope_id)
        return True
