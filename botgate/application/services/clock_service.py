"""System clock with a pinnable test override.

SystemClock returns wall-clock UTC time until set_fixed() pins it to an
instant; clear_fixed() returns it to wall-clock time. Stores that keep
their own notion of time (the in-memory counter store) take a separate
clock instance so tests can pin both together.

Example:
    >>> clock = SystemClock()
    >>> clock.set_fixed(datetime(2025, 1, 1, tzinfo=timezone.utc))
    >>> clock.now()
    datetime.datetime(2025, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
    >>> clock.advance(seconds=120)
    >>> clock.clear_fixed()
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from botgate.application.ports.clock import ClockProtocol


class SystemClock(ClockProtocol):
    """Wall-clock time source that tests can pin.

    Attributes:
        _fixed: The pinned instant, or None for wall-clock time.
    """

    def __init__(self, fixed: datetime | None = None) -> None:
        self._fixed: datetime | None = None
        if fixed is not None:
            self.set_fixed(fixed)

    def now(self) -> datetime:
        """Return the pinned instant, or the current UTC time."""
        if self._fixed is not None:
            return self._fixed
        return datetime.now(timezone.utc)

    def set_fixed(self, instant: datetime) -> None:
        """Pin all subsequent now() calls to instant.

        If instant is timezone-naive, UTC is assumed.
        """
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._fixed = instant

    def clear_fixed(self) -> None:
        """Return to wall-clock time."""
        self._fixed = None

    def advance(self, seconds: float) -> None:
        """Move a pinned clock forward.

        Raises:
            RuntimeError: If the clock is not pinned.
            ValueError: If seconds is negative.
        """
        if self._fixed is None:
            raise RuntimeError("Cannot advance a clock that is not pinned; call set_fixed() first")
        if seconds < 0:
            raise ValueError(f"Cannot advance time backwards. Got {seconds} seconds.")
        self._fixed += timedelta(seconds=seconds)

    @property
    def is_fixed(self) -> bool:
        return self._fixed is not None

    def __repr__(self) -> str:
        if self._fixed is None:
            return "SystemClock(wall)"
        return f"SystemClock(fixed={self._fixed.isoformat()})"
