"""Message Sender Port - outbound transport to the messaging backend."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MessageSenderPort(Protocol):
    """Protocol for sending text messages to a chat.

    The wire protocol is owned by the implementation; the throttle core
    only ever sends plain text replies.
    """

    async def send_message(self, chat_id: int | None, text: str) -> None:
        """Send a text message to the given chat.

        Args:
            chat_id: Target chat; None when the event carried no chat.
            text: Message body.
        """
        ...
