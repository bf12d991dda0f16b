"""Aggregate throttle decisions returned by the gate."""

from __future__ import annotations

from dataclasses import dataclass

from botgate.domain.models.scope import Scope


@dataclass(frozen=True)
class GateDecision:
    """Outcome of evaluating every active scope for one event.

    Attributes:
        allowed: True if every scope admitted the event.
        remaining: Seconds until the governing scope reopens (denials only).
        should_warn: True iff this denial is the one that must notify the caller.
        scope: The denying scope with the largest remaining time.
    """

    allowed: bool
    remaining: float = 0.0
    should_warn: bool = False
    scope: Scope | None = None

    @classmethod
    def allow(cls) -> GateDecision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, scope: Scope, remaining: float, should_warn: bool) -> GateDecision:
        return cls(allowed=False, remaining=remaining, should_warn=should_warn, scope=scope)

    @property
    def available_in(self) -> int:
        """Remaining time truncated to whole seconds."""
        return int(self.remaining)


@dataclass(frozen=True)
class ScopeUsage:
    """Read-only snapshot of one scope's window for a requester.

    Attributes:
        scope: The scope inspected.
        hits: Hits recorded in the live window (0 when no window is open).
        remaining_attempts: Hits still allowed in the live window.
        resets_in: Seconds until the live window closes (0 when none).
        warned: Whether the caller was already warned in this window.
    """

    scope: Scope
    hits: int
    remaining_attempts: int
    resets_in: int
    warned: bool = False
