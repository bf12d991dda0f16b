"""MessageSenderStub - records outbound messages instead of sending them.

[DEV_MODE] Development and test stub. Nothing leaves the process.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SentMessage:
    """One recorded outbound message."""

    chat_id: int | None
    text: str


class MessageSenderStub:
    """In-memory implementation of MessageSenderPort.

    Attributes:
        sent: Every message sent, oldest first.
    """

    DEV_MODE: bool = True

    def __init__(self) -> None:
        self.sent: list[SentMessage] = []

    async def send_message(self, chat_id: int | None, text: str) -> None:
        self.sent.append(SentMessage(chat_id=chat_id, text=text))

    # Test helper methods

    def pop_texts(self) -> list[str]:
        """Return the texts sent since the last call and forget them."""
        texts = [message.text for message in self.sent]
        self.sent.clear()
        return texts

    @property
    def last_text(self) -> str | None:
        return self.sent[-1].text if self.sent else None
