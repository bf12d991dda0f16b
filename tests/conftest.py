"""
Pytest configuration and shared fixtures for botgate tests.

Testing Standards:
- Async tests are marked with pytest.mark.asyncio
- Use AsyncMock for async backend failure injection
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/ (marked integration)
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from prometheus_client import CollectorRegistry

from botgate.application.ports.warning_action import WarningAction, default_warning_action
from botgate.application.services.dispatcher import EventDispatcher
from botgate.application.services.scope_resolver import ScopeResolver
from botgate.application.services.throttle_gate import ThrottleGate
from botgate.domain.models.chat import Chat, ChatType, InboundMessage, User
from botgate.infrastructure.monitoring.metrics import ThrottleMetrics
from botgate.infrastructure.stubs.in_memory_counter_store import InMemoryCounterStore
from botgate.infrastructure.stubs.message_sender_stub import MessageSenderStub
from tests.helpers import PinnedClocks


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from botgate import __version__

    return __version__


@pytest.fixture
def clocks() -> PinnedClocks:
    """Gate and store clocks pinned to 2025-01-01 00:00:00 UTC."""
    return PinnedClocks.at("2025-01-01 00:00:00")


@pytest.fixture
def store(clocks: PinnedClocks) -> InMemoryCounterStore:
    """In-memory counter store driven by the pinned store clock."""
    return InMemoryCounterStore(clock=clocks.store)


@pytest.fixture
def metrics() -> ThrottleMetrics:
    """Metrics collector on an isolated registry."""
    return ThrottleMetrics(registry=CollectorRegistry())


@pytest.fixture
def make_gate(
    store: InMemoryCounterStore,
    clocks: PinnedClocks,
    metrics: ThrottleMetrics,
) -> Callable[..., ThrottleGate]:
    """Factory building a gate with an optional custom warning action."""

    def _make(
        warning_action: WarningAction = default_warning_action,
        window_seconds: int = 60,
    ) -> ThrottleGate:
        return ThrottleGate(
            store=store,
            clock=clocks.gate,
            resolver=ScopeResolver(window_seconds=window_seconds),
            warning_action=warning_action,
            metrics=metrics,
        )

    return _make


@pytest.fixture
def gate(make_gate: Callable[..., ThrottleGate]) -> ThrottleGate:
    """Gate with the default warning action and 60 second windows."""
    return make_gate()


@pytest.fixture
def sender() -> MessageSenderStub:
    return MessageSenderStub()


@pytest.fixture
def dispatcher(gate: ThrottleGate, sender: MessageSenderStub) -> EventDispatcher:
    return EventDispatcher(gate=gate, sender=sender)


@pytest.fixture
def tony() -> User:
    return User(
        id=123456789,
        is_bot=False,
        first_name="Tony",
        last_name="Stark",
        username="IronMan",
        language_code="en",
    )


@pytest.fixture
def private_chat() -> Chat:
    return Chat(
        id=123456789,
        type=ChatType.PRIVATE,
        username="IronMan",
        first_name="Tony",
        last_name="Stark",
    )


@pytest.fixture
def hear(
    dispatcher: EventDispatcher,
    sender: MessageSenderStub,
    tony: User,
    private_chat: Chat,
) -> Callable[[str], object]:
    """Dispatch a text from Tony and return the replies it produced."""

    async def _hear(text: str) -> list[str]:
        await dispatcher.dispatch(InboundMessage(text=text, chat=private_chat, user=tony))
        return sender.pop_texts()

    return _hear
