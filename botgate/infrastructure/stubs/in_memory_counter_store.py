"""In-memory implementation of CounterStorePort.

Suitable for tests and single-process bots. State does not survive a
restart and is not shared between processes; use RedisCounterStore for
that.

Expiry is evaluated against the store's own clock, which tests pin
alongside the gate's clock so that TTL eviction and window arithmetic
agree.

Memory stays bounded by live keys: expired entries are swept every
sweep_interval writes, and a per-key lock exists only while some
coroutine holds or waits on it.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, TypeVar

import structlog

from botgate.application.ports.clock import ClockProtocol
from botgate.application.ports.counter_store import WindowTransition
from botgate.application.services.clock_service import SystemClock
from botgate.domain.models.rate_window import WindowRecord

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_SWEEP_INTERVAL = 1024


@dataclass
class _Entry:
    value: Any
    expires_at: datetime


class InMemoryCounterStore:
    """Dict-backed counter store with per-key expiry.

    Each key has its own asyncio.Lock, so read-modify-write operations on
    one key are serialized while unrelated keys never wait on each other.

    Attributes:
        _clock: Store-local time source used for TTL expiry.
        _entries: Key -> stored value and expiry instant.
        _locks: Key -> lock serializing updates to that key.
        _lock_users: Key -> coroutines holding or waiting on its lock.
        _writes_since_sweep: Writes since expired entries were last swept.
    """

    def __init__(
        self,
        clock: ClockProtocol | None = None,
        sweep_interval: int = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        """Initialize an empty store.

        Args:
            clock: Time source for expiry (default: a fresh SystemClock).
            sweep_interval: Writes between sweeps of expired entries.
        """
        if sweep_interval < 1:
            raise ValueError(f"sweep_interval must be at least 1, got {sweep_interval}")
        self._clock = clock or SystemClock()
        self._sweep_interval = sweep_interval
        self._entries: dict[str, _Entry] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._writes_since_sweep = 0

    @property
    def clock(self) -> ClockProtocol:
        return self._clock

    def _live(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock.now() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry

    def _store(self, key: str, value: Any, ttl_seconds: int) -> None:
        expires_at = self._clock.now() + timedelta(seconds=ttl_seconds)
        self._entries[key] = _Entry(value=value, expires_at=expires_at)
        self._writes_since_sweep += 1
        if self._writes_since_sweep >= self._sweep_interval:
            self.sweep()

    @asynccontextmanager
    async def _locked(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._lock_users[key] - 1
            if remaining:
                self._lock_users[key] = remaining
            else:
                del self._lock_users[key]
                del self._locks[key]

    def sweep(self) -> int:
        """Drop every expired entry.

        Returns:
            Number of entries removed.
        """
        now = self._clock.now()
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
        self._writes_since_sweep = 0
        if expired:
            logger.debug("in_memory_counter_store_swept", entries_removed=len(expired))
        return len(expired)

    async def increment_or_init(self, key: str, ttl_seconds: int) -> int:
        async with self._locked(key):
            entry = self._live(key)
            if entry is None:
                self._store(key, 1, ttl_seconds)
                return 1
            entry.value = int(entry.value) + 1
            return entry.value

    async def get_window(self, key: str) -> WindowRecord | None:
        entry = self._live(key)
        if entry is None:
            return None
        return entry.value

    async def put_window(self, key: str, record: WindowRecord, ttl_seconds: int) -> None:
        async with self._locked(key):
            self._store(key, record, ttl_seconds)

    async def update_window(
        self,
        key: str,
        transition: WindowTransition[T],
        ttl_seconds: int,
    ) -> T:
        async with self._locked(key):
            entry = self._live(key)
            current = entry.value if entry is not None else None
            record, result = transition(current)
            if record is not None:
                self._store(key, record, ttl_seconds)
            return result

    async def delete(self, key: str) -> None:
        async with self._locked(key):
            self._entries.pop(key, None)

    # Test helper methods

    def keys(self) -> list[str]:
        """Return the keys of every live entry (test helper)."""
        return [key for key in list(self._entries) if self._live(key) is not None]

    def entry_count(self) -> int:
        """Return the number of stored entries, expired or not (test helper)."""
        return len(self._entries)

    def lock_count(self) -> int:
        """Return the number of per-key locks currently allocated (test helper)."""
        return len(self._locks)

    def clear(self) -> None:
        """Drop every entry (test helper)."""
        count = len(self._entries)
        self._entries.clear()
        logger.debug("in_memory_counter_store_cleared", entries_cleared=count)
