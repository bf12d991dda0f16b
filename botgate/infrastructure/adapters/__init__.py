"""Production adapters for botgate ports."""

from botgate.infrastructure.adapters.redis_counter_store import (
    RedisCounterStore,
    WindowRecordPayload,
)

__all__: list[str] = ["RedisCounterStore", "WindowRecordPayload"]
