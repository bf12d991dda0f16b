"""Chat value objects carried by inbound events.

These mirror the handful of messaging-platform records the dispatcher
needs to attribute an event to a requester: the sending user, the chat
the message arrived in, and the member descriptor for that user in the
chat.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChatType(str, Enum):
    """Kind of chat a message arrived in."""

    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"
    CHANNEL = "channel"


@dataclass(frozen=True)
class User:
    """A user or bot account.

    Attributes:
        id: Unique identifier of the user.
        is_bot: True if the account is a bot.
        first_name: User's first name.
        last_name: Optional last name.
        username: Optional username.
        language_code: Optional IETF language tag of the user's client.
    """

    id: int
    is_bot: bool
    first_name: str
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None


@dataclass(frozen=True)
class Chat:
    """A chat (private conversation, group or channel).

    Attributes:
        id: Unique identifier of the chat.
        type: Kind of chat.
        title: Title for groups and channels.
        username: Username for private chats and public groups/channels.
        first_name: First name of the other party in a private chat.
        last_name: Last name of the other party in a private chat.
    """

    id: int
    type: ChatType
    title: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True)
class ChatMember:
    """A chat member that has no additional privileges or restrictions.

    Attributes:
        user: Information about the user.
        status: The member's status in the chat, always "member".
    """

    user: User
    status: str = "member"

    def __post_init__(self) -> None:
        if self.status != "member":
            raise ValueError(f"ChatMember status must be 'member', got {self.status!r}")


@dataclass(frozen=True)
class InboundMessage:
    """A text message received by the bot.

    Attributes:
        text: Message text used for handler matching.
        chat: Chat the message was sent in, if any.
        user: Sender of the message, if any.
        update_id: Identifier of the update carrying the message.
    """

    text: str
    chat: Chat | None = None
    user: User | None = None
    update_id: int | None = None
