"""PinnedClocks - keeps the gate clock and the store clock in lockstep.

The in-memory counter store evaluates TTL expiry against its own clock
while the throttle gate does window arithmetic against another. Tests
must move both together or a window could be evicted early (or late)
relative to the gate's view of time.

Usage:
    clocks = PinnedClocks.at("2025-01-01 00:00:00")
    store = InMemoryCounterStore(clock=clocks.store)
    gate = ThrottleGate(store=store, clock=clocks.gate)

    clocks.set("2025-01-01 00:02:00")
    clocks.advance(seconds=10)
"""

from __future__ import annotations

from datetime import datetime, timezone

from botgate.application.services.clock_service import SystemClock


def parse_instant(value: str | datetime) -> datetime:
    """Parse 'YYYY-MM-DD HH:MM:SS' (UTC) or pass a datetime through."""
    if isinstance(value, datetime):
        instant = value
    else:
        instant = datetime.fromisoformat(value)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant


class PinnedClocks:
    """Two independently pinned clocks moved together.

    Attributes:
        gate: Clock handed to the throttle gate.
        store: Clock handed to the in-memory counter store.
    """

    def __init__(self, instant: datetime) -> None:
        self.gate = SystemClock(fixed=instant)
        self.store = SystemClock(fixed=instant)

    @classmethod
    def at(cls, value: str | datetime) -> PinnedClocks:
        return cls(parse_instant(value))

    def set(self, value: str | datetime) -> None:
        instant = parse_instant(value)
        self.gate.set_fixed(instant)
        self.store.set_fixed(instant)

    def advance(self, seconds: float) -> None:
        self.gate.advance(seconds)
        self.store.advance(seconds)

    def now(self) -> datetime:
        return self.gate.now()
