"""Counter Store Port - backend interface for rate windows.

This is the only backend-facing interface of the rate limiting core.
Any backend (in-memory, Redis, embedded key-value store) that satisfies
it is interchangeable.

Atomicity:
- increment_or_init and update_window must be atomic per key; concurrent
  callers targeting the same key must never lose an update.
- Unrelated keys must not contend.

Failure:
- Any operation that cannot complete raises StoreUnavailableError. Retry
  policy, if any, belongs to the implementation.

Expiry:
- TTLs passed by the core are never shorter than the window duration, so
  eviction never removes a live window.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar, runtime_checkable

from botgate.domain.models.rate_window import WindowRecord

T = TypeVar("T")

# Receives the stored record (None when absent or evicted) and returns the
# record to persist (None leaves the key untouched) and a caller-defined result.
WindowTransition = Callable[[WindowRecord | None], tuple[WindowRecord | None, T]]


@runtime_checkable
class CounterStorePort(Protocol):
    """Protocol for rate window storage.

    Usage:
        count = await store.increment_or_init("hits:42", ttl_seconds=60)

        decision = await store.update_window(
            "scope|chat:user",
            lambda record: (new_record, decision),
            ttl_seconds=60,
        )
    """

    async def increment_or_init(self, key: str, ttl_seconds: int) -> int:
        """Atomically increment a plain counter.

        If the key is absent or expired it is set to 1 with the given TTL
        and 1 is returned; otherwise the value is incremented and the new
        value returned. The TTL is not refreshed on increment.

        Args:
            key: Counter key.
            ttl_seconds: Expiry applied when the counter is created.

        Returns:
            Counter value after the increment.
        """
        ...

    async def get_window(self, key: str) -> WindowRecord | None:
        """Return the stored window record, or None if absent/evicted."""
        ...

    async def put_window(self, key: str, record: WindowRecord, ttl_seconds: int) -> None:
        """Store a window record, replacing any existing value."""
        ...

    async def update_window(
        self,
        key: str,
        transition: WindowTransition[T],
        ttl_seconds: int,
    ) -> T:
        """Atomically read, transform and persist a window record.

        The transition may be invoked more than once by implementations
        that use optimistic concurrency, so it must be free of side
        effects.

        Args:
            key: Window key.
            transition: Maps the current record to (record_to_store, result);
                a None record_to_store skips the write.
            ttl_seconds: Expiry applied to the persisted record.

        Returns:
            The result produced by the transition that was committed.
        """
        ...

    async def delete(self, key: str) -> None:
        """Remove a key. Deleting a missing key is not an error."""
        ...
