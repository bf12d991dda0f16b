"""Redis implementation of CounterStorePort.

Shares rate windows between bot processes. Atomicity per key:

- increment_or_init runs INCR + EXPIRE in one Lua script.
- update_window uses WATCH/MULTI/EXEC optimistic transactions. A
  conflicting write aborts EXEC and the transition is re-run against the
  fresh value, up to max_transaction_retries times.

Window records are stored as JSON and validated on read. Any Redis
error, exhausted retry budget or malformed payload surfaces as
StoreUnavailableError; the throttle gate never guesses an outcome.

Key format: "{key_prefix}:{rate_key}"
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, TypeVar

import redis.asyncio as aioredis
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from redis.exceptions import RedisError, WatchError

from botgate.application.ports.counter_store import WindowTransition
from botgate.domain.errors.rate_limit import StoreUnavailableError
from botgate.domain.models.rate_window import WindowRecord

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_KEY_PREFIX = "botgate:throttle"
DEFAULT_MAX_TRANSACTION_RETRIES = 5

_INCREMENT_OR_INIT_LUA = """
local value = redis.call('INCR', KEYS[1])
if value == 1 then
    redis.call('EXPIRE', KEYS[1], ARGV[1])
end
return value
"""


class WindowRecordPayload(BaseModel):
    """Wire shape of a stored window record."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    count: int = Field(ge=0)
    window_start: datetime
    warned: bool = False

    @classmethod
    def from_record(cls, record: WindowRecord) -> WindowRecordPayload:
        return cls(count=record.count, window_start=record.window_start, warned=record.warned)

    def to_record(self) -> WindowRecord:
        return WindowRecord(count=self.count, window_start=self.window_start, warned=self.warned)


class RedisCounterStore:
    """Counter store backed by Redis.

    Attributes:
        _client: Async Redis client.
        _key_prefix: Namespace prepended to every key.
        _max_retries: Optimistic transaction attempts before giving up.
    """

    def __init__(
        self,
        client: Redis[Any],
        key_prefix: str = DEFAULT_KEY_PREFIX,
        max_transaction_retries: int = DEFAULT_MAX_TRANSACTION_RETRIES,
    ) -> None:
        """Initialize the store.

        Args:
            client: Async Redis client (owned by the caller).
            key_prefix: Namespace for all keys written by this store.
            max_transaction_retries: WATCH conflicts tolerated per update.
        """
        if max_transaction_retries < 1:
            raise ValueError(
                f"max_transaction_retries must be at least 1, got {max_transaction_retries}"
            )
        self._client = client
        self._key_prefix = key_prefix
        self._max_retries = max_transaction_retries
        self._increment_script = client.register_script(_INCREMENT_OR_INIT_LUA)
        self._log = logger.bind(component="redis_counter_store")

    @classmethod
    def from_url(
        cls,
        url: str,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        socket_timeout: float | None = None,
        max_transaction_retries: int = DEFAULT_MAX_TRANSACTION_RETRIES,
    ) -> RedisCounterStore:
        """Create a store with its own client from a redis:// URL."""
        client = aioredis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client, key_prefix=key_prefix, max_transaction_retries=max_transaction_retries)

    def _full_key(self, key: str) -> str:
        return f"{self._key_prefix}:{key}"

    @staticmethod
    def _encode(record: WindowRecord) -> str:
        return WindowRecordPayload.from_record(record).model_dump_json()

    @staticmethod
    def _decode(key: str, raw: bytes | str | None) -> WindowRecord | None:
        if raw is None:
            return None
        try:
            return WindowRecordPayload.model_validate_json(raw).to_record()
        except (ValidationError, ValueError) as exc:
            raise StoreUnavailableError("decode", key, f"malformed window record: {exc}") from exc

    async def increment_or_init(self, key: str, ttl_seconds: int) -> int:
        full_key = self._full_key(key)
        try:
            value = await self._increment_script(keys=[full_key], args=[ttl_seconds])
        except RedisError as exc:
            raise StoreUnavailableError("increment_or_init", full_key, str(exc)) from exc
        return int(value)

    async def get_window(self, key: str) -> WindowRecord | None:
        full_key = self._full_key(key)
        try:
            raw = await self._client.get(full_key)
        except RedisError as exc:
            raise StoreUnavailableError("get_window", full_key, str(exc)) from exc
        return self._decode(full_key, raw)

    async def put_window(self, key: str, record: WindowRecord, ttl_seconds: int) -> None:
        full_key = self._full_key(key)
        try:
            await self._client.set(full_key, self._encode(record), ex=ttl_seconds)
        except RedisError as exc:
            raise StoreUnavailableError("put_window", full_key, str(exc)) from exc

    async def update_window(
        self,
        key: str,
        transition: WindowTransition[T],
        ttl_seconds: int,
    ) -> T:
        full_key = self._full_key(key)
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                for attempt in range(1, self._max_retries + 1):
                    try:
                        await pipe.watch(full_key)
                        current = self._decode(full_key, await pipe.get(full_key))
                        record, result = transition(current)
                        if record is None:
                            await pipe.reset()
                            return result
                        pipe.multi()
                        pipe.set(full_key, self._encode(record), ex=ttl_seconds)
                        await pipe.execute()
                        return result
                    except WatchError:
                        self._log.debug("window_update_conflict", key=full_key, attempt=attempt)
                        continue
        except RedisError as exc:
            raise StoreUnavailableError("update_window", full_key, str(exc)) from exc

        raise StoreUnavailableError(
            "update_window",
            full_key,
            f"gave up after {self._max_retries} conflicting transactions",
        )

    async def delete(self, key: str) -> None:
        full_key = self._full_key(key)
        try:
            await self._client.delete(full_key)
        except RedisError as exc:
            raise StoreUnavailableError("delete", full_key, str(exc)) from exc

    async def aclose(self) -> None:
        """Close the underlying client connection pool."""
        await self._client.aclose()
