"""In-process stub implementations of botgate ports.

[DEV_MODE] These are for tests and single-process development.
"""

from botgate.infrastructure.stubs.in_memory_counter_store import InMemoryCounterStore
from botgate.infrastructure.stubs.message_sender_stub import MessageSenderStub, SentMessage

__all__: list[str] = [
    "InMemoryCounterStore",
    "MessageSenderStub",
    "SentMessage",
]
