"""Rate Window State Machine: fixed-window counter per rate key.

States per rate key:

    NoWindow -> ActiveWindow(count, window_start, warned) -> (expired) -> NoWindow

A window is expired iff now - window_start >= window duration. An expired
record is treated as absent before anything else happens, so a new
window opens with count 0 and warned false.

This is a fixed-window counter. Up to twice the limit can get through
across a window boundary; callers that need smoother admission must use
a different limiter.

Every read-modify-write goes through CounterStorePort.update_window so
the store's per-key atomicity covers the whole transition.
"""

from __future__ import annotations

from datetime import datetime

from botgate.application.ports.counter_store import CounterStorePort
from botgate.application.services.base import LoggingMixin
from botgate.domain.errors.rate_limit import MisconfiguredScopeError
from botgate.domain.models.rate_window import WindowDecision, WindowRecord


class RateWindowStateMachine(LoggingMixin):
    """Admits or denies hits against one fixed window per key.

    Attributes:
        _store: Counter store holding the window records.
    """

    def __init__(self, store: CounterStorePort) -> None:
        """Initialize the state machine.

        Args:
            store: Backend holding {count, window_start, warned} records.
        """
        self._store = store
        self._init_logger(component="throttle.window")

    async def check_and_increment(
        self,
        key: str,
        limit: int,
        window_seconds: int,
        now: datetime,
    ) -> WindowDecision:
        """Record a hit if the window has room, otherwise deny.

        On denial the record is written back unchanged, which keeps
        window_start and warned intact across repeated denials.

        Args:
            key: Rate key string.
            limit: Maximum hits per window.
            window_seconds: Window duration.
            now: Current instant.

        Returns:
            Admit with the new count, or Deny with the seconds left and the
            warned flag as read.

        Raises:
            MisconfiguredScopeError: If limit or window_seconds is not positive.
            StoreUnavailableError: If the store cannot complete the update.
        """
        if limit < 1 or window_seconds < 1:
            raise MisconfiguredScopeError(key, limit, window_seconds)

        def transition(record: WindowRecord | None) -> tuple[WindowRecord, WindowDecision]:
            if record is None or record.is_expired(window_seconds, now):
                record = WindowRecord.open(now)
            if record.count < limit:
                record = record.hit()
                return record, WindowDecision.admit(record)
            return record, WindowDecision.deny(
                record, record.remaining_seconds(window_seconds, now)
            )

        decision = await self._store.update_window(key, transition, ttl_seconds=window_seconds)

        self._log_operation("check_and_increment", key=key).debug(
            "window_checked",
            admitted=decision.admitted,
            count=decision.count,
            limit=limit,
        )
        return decision

    async def mark_warned(
        self,
        key: str,
        window_start: datetime,
        window_seconds: int,
        now: datetime,
    ) -> bool:
        """Flip the warned flag of the window that opened at window_start.

        Only the call that actually performs the false -> true flip gets
        True back, so concurrent denials produce at most one warning. If
        the window has rolled over in the meantime nothing is written.

        Returns:
            True if this call set the flag.
        """

        def transition(record: WindowRecord | None) -> tuple[WindowRecord | None, bool]:
            if (
                record is None
                or record.is_expired(window_seconds, now)
                or record.window_start != window_start
                or record.warned
            ):
                return None, False
            return record.mark_warned(), True

        return await self._store.update_window(key, transition, ttl_seconds=window_seconds)

    async def inspect(
        self,
        key: str,
        window_seconds: int,
        now: datetime,
    ) -> WindowRecord | None:
        """Return the live window for key without writing, or None."""
        record = await self._store.get_window(key)
        if record is None or record.is_expired(window_seconds, now):
            return None
        return record

    async def clear(self, key: str) -> None:
        """Drop the window for key; the next hit opens a fresh one."""
        await self._store.delete(key)
        self._log_operation("clear", key=key).info("window_cleared")
