"""Bootstrap wiring for the throttle gate.

Selects the counter store backend from configuration and assembles the
gate and dispatcher. The warning action is passed in here rather than
set globally; tests build their own gate with a different action.
"""

from __future__ import annotations

from botgate.application.ports.clock import ClockProtocol
from botgate.application.ports.counter_store import CounterStorePort
from botgate.application.ports.message_sender import MessageSenderPort
from botgate.application.ports.warning_action import WarningAction, default_warning_action
from botgate.application.services.clock_service import SystemClock
from botgate.application.services.dispatcher import EventDispatcher
from botgate.application.services.scope_resolver import ScopeResolver
from botgate.application.services.throttle_gate import ThrottleGate
from botgate.config.throttle_config import ThrottleConfig
from botgate.infrastructure.adapters.redis_counter_store import RedisCounterStore
from botgate.infrastructure.stubs.in_memory_counter_store import InMemoryCounterStore


def create_counter_store(
    config: ThrottleConfig,
    clock: ClockProtocol | None = None,
) -> CounterStorePort:
    """Build the counter store selected by config.store_backend.

    Args:
        config: Throttle configuration.
        clock: Store-local clock for the memory backend.
    """
    if config.store_backend == "redis":
        return RedisCounterStore.from_url(
            config.redis_url,
            key_prefix=config.redis_key_prefix,
            socket_timeout=config.redis_socket_timeout,
            max_transaction_retries=config.redis_max_transaction_retries,
        )
    return InMemoryCounterStore(clock=clock)


def create_throttle_gate(
    config: ThrottleConfig | None = None,
    store: CounterStorePort | None = None,
    clock: ClockProtocol | None = None,
    warning_action: WarningAction = default_warning_action,
) -> ThrottleGate:
    """Assemble a ThrottleGate from configuration."""
    config = config or ThrottleConfig.from_environment()
    return ThrottleGate(
        store=store or create_counter_store(config),
        clock=clock or SystemClock(),
        resolver=ScopeResolver(window_seconds=config.window_seconds),
        warning_action=warning_action,
    )


def create_dispatcher(
    sender: MessageSenderPort,
    config: ThrottleConfig | None = None,
    gate: ThrottleGate | None = None,
) -> EventDispatcher:
    """Assemble an EventDispatcher with a gate built from configuration."""
    config = config or ThrottleConfig.from_environment()
    return EventDispatcher(
        gate=gate or create_throttle_gate(config),
        sender=sender,
        fail_open=config.fail_open,
    )
