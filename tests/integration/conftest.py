"""
Integration test configuration with testcontainers.

Provides a session-scoped Redis 7 container and a per-test client.

Container Reuse Pattern:
- The container is started once per test session (scope="session")
- Redis state is flushed after every test (function-scoped client)

Usage:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_example(redis_client: Redis) -> None:
        ...

Note: Docker must be running for these fixtures to work.
"""

from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
import redis.asyncio as aioredis
from testcontainers.redis import RedisContainer


@pytest.fixture(scope="session")
def redis_container() -> Generator[RedisContainer, None, None]:
    """Session-scoped Redis 7 container, skipped when Docker is unavailable."""
    try:
        container = RedisContainer("redis:7-alpine")
        container.start()
    except Exception as exc:
        pytest.skip(f"Docker is not available: {exc}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture
async def redis_client(
    redis_container: RedisContainer,
) -> AsyncGenerator[aioredis.Redis, None]:  # type: ignore[type-arg]
    """Per-test Redis client with FLUSHDB isolation."""
    host = redis_container.get_container_host_ip()
    port = redis_container.get_exposed_port(6379)

    client: aioredis.Redis[Any] = aioredis.Redis(host=host, port=int(port))

    yield client

    await client.flushdb()
    await client.aclose()
