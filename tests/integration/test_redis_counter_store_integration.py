"""Integration tests for RedisCounterStore against a real Redis 7 server.

These tests verify:
- Lua increment sets the TTL only when the counter is created
- Window records survive a JSON round trip through Redis
- Concurrent updates to one key are never lost
- The throttle gate produces the same decisions on Redis as in memory
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import pytest

from botgate.application.services.clock_service import SystemClock
from botgate.application.services.throttle_gate import ThrottleGate
from botgate.domain.models.handler_tree import ApplicationNode
from botgate.domain.models.rate_window import WindowRecord
from botgate.domain.models.scope import RequesterIdentity
from botgate.infrastructure.adapters.redis_counter_store import RedisCounterStore
from botgate.infrastructure.monitoring.metrics import ThrottleMetrics

if TYPE_CHECKING:
    from redis.asyncio import Redis

START = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def redis_store(redis_client: Redis[Any]) -> RedisCounterStore:
    return RedisCounterStore(redis_client, key_prefix="it")


class TestIncrementOrInit:
    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_counts_and_sets_ttl_once(
        self, redis_store: RedisCounterStore, redis_client: Redis[Any]
    ) -> None:
        assert await redis_store.increment_or_init("k", ttl_seconds=60) == 1
        assert await redis_store.increment_or_init("k", ttl_seconds=600) == 2

        ttl = await redis_client.ttl("it:k")
        assert 0 < ttl <= 60


class TestWindowRecords:
    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_put_get_delete(
        self, redis_store: RedisCounterStore, redis_client: Redis[Any]
    ) -> None:
        record = WindowRecord(count=3, window_start=START, warned=True)

        await redis_store.put_window("k", record, ttl_seconds=60)

        assert await redis_store.get_window("k") == record
        assert 0 < await redis_client.ttl("it:k") <= 60

        await redis_store.delete("k")
        assert await redis_store.get_window("k") is None

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_concurrent_updates_are_not_lost(
        self, redis_client: Redis[Any]
    ) -> None:
        store = RedisCounterStore(redis_client, key_prefix="it", max_transaction_retries=100)

        def hit(record: WindowRecord | None) -> tuple[WindowRecord, None]:
            return (record or WindowRecord.open(START)).hit(), None

        await asyncio.gather(*(store.update_window("k", hit, ttl_seconds=60) for _ in range(10)))

        stored = await store.get_window("k")
        assert stored is not None and stored.count == 10


class TestGateOnRedis:
    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_limit_two_warns_once(self, redis_store: RedisCounterStore) -> None:
        clock = SystemClock(fixed=START)
        gate = ThrottleGate(
            store=redis_store, clock=clock, metrics=ThrottleMetrics()
        )
        handler = ApplicationNode().on_text("hi", lambda context: None).throttle(2)
        tony = RequesterIdentity(chat_id=1, user_id=1)

        first = await gate.admit(handler, tony)
        second = await gate.admit(handler, tony)
        clock.advance(10)
        third = await gate.admit(handler, tony)
        fourth = await gate.admit(handler, tony)

        assert first.allowed and second.allowed
        assert not third.allowed and third.should_warn and third.available_in == 50
        assert not fourth.allowed and not fourth.should_warn
