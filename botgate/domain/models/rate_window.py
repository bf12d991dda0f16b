"""Fixed-window record and per-window decisions.

The window is a fixed window, not a sliding one: a caller may get up to
twice the limit through across a window boundary (limit hits at the end
of one window, limit hits at the start of the next). This is accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta


@dataclass(frozen=True)
class WindowRecord:
    """Persisted state for one rate key.

    Attributes:
        count: Hits recorded in the current window (never negative).
        window_start: Instant the current window opened.
        warned: True once a denial notice was issued for this window.
    """

    count: int
    window_start: datetime
    warned: bool = False

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"count must be non-negative, got {self.count}")

    @classmethod
    def open(cls, now: datetime) -> WindowRecord:
        """Return a fresh, empty window starting at now."""
        return cls(count=0, window_start=now, warned=False)

    def elapsed(self, now: datetime) -> timedelta:
        return now - self.window_start

    def is_expired(self, window_seconds: int, now: datetime) -> bool:
        """True iff now - window_start >= window duration."""
        return self.elapsed(now) >= timedelta(seconds=window_seconds)

    def remaining_seconds(self, window_seconds: int, now: datetime) -> float:
        """Seconds until this window closes (never negative)."""
        remaining = window_seconds - self.elapsed(now).total_seconds()
        return max(0.0, remaining)

    def hit(self) -> WindowRecord:
        return replace(self, count=self.count + 1)

    def mark_warned(self) -> WindowRecord:
        return replace(self, warned=True)


@dataclass(frozen=True)
class WindowDecision:
    """Outcome of a single scope's check_and_increment.

    Attributes:
        admitted: True if the hit fit in the window (Admit).
        count: Window count after this call.
        window_start: Start of the window the decision applies to.
        remaining: Seconds until the window resets (0.0 on Admit).
        already_warned: Warned flag as read during this call (Deny only).
    """

    admitted: bool
    count: int
    window_start: datetime
    remaining: float = 0.0
    already_warned: bool = False

    @classmethod
    def admit(cls, record: WindowRecord) -> WindowDecision:
        return cls(admitted=True, count=record.count, window_start=record.window_start)

    @classmethod
    def deny(cls, record: WindowRecord, remaining: float) -> WindowDecision:
        return cls(
            admitted=False,
            count=record.count,
            window_start=record.window_start,
            remaining=remaining,
            already_warned=record.warned,
        )
