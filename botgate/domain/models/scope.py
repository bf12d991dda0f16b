"""Quota scopes and rate keys for the hierarchical rate limiter.

A Scope is one level of quota enforcement (handler, group or the whole
application). A RateKey pairs a scope with the requester an event is
attributed to; it is the lookup key for the window record in the
counter store.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from botgate.domain.errors.rate_limit import MisconfiguredScopeError

# Window length shared by every scope unless configured otherwise.
DEFAULT_WINDOW_SECONDS: int = 60


class ScopeKind(str, Enum):
    """Level of the routing tree a scope belongs to."""

    HANDLER = "handler"
    GROUP = "group"
    GLOBAL = "global"


@dataclass(frozen=True)
class Scope:
    """One configured level of quota enforcement.

    Attributes:
        scope_id: Stable identifier derived from the routing tree node.
        kind: Whether the scope belongs to a handler, group or the app.
        limit: Maximum hits per window (must be positive).
        window_seconds: Fixed window duration in seconds (must be positive).

    Raises:
        MisconfiguredScopeError: If limit or window_seconds is not positive.
    """

    scope_id: str
    kind: ScopeKind
    limit: int
    window_seconds: int = DEFAULT_WINDOW_SECONDS

    def __post_init__(self) -> None:
        """Validate quota values."""
        if self.limit < 1 or self.window_seconds < 1:
            raise MisconfiguredScopeError(self.scope_id, self.limit, self.window_seconds)

    @property
    def is_shared(self) -> bool:
        """True for the application-wide scope, whose window every requester shares."""
        return self.kind is ScopeKind.GLOBAL


@dataclass(frozen=True)
class RequesterIdentity:
    """Who an event is attributed to.

    Events without a chat or user (channel posts, service updates) fall
    back to a single global identity shared by all such events. The
    application-wide scope always uses the global identity.

    Attributes:
        chat_id: Chat identifier, None for the global identity.
        user_id: User identifier, None for the global identity.
    """

    chat_id: int | None = None
    user_id: int | None = None

    @classmethod
    def global_identity(cls) -> RequesterIdentity:
        """Return the identity shared by unattributed events."""
        return cls()

    @property
    def is_global(self) -> bool:
        """True if this is the shared global identity."""
        return self.chat_id is None and self.user_id is None

    def as_key_part(self) -> str:
        if self.is_global:
            return "global"
        chat = "-" if self.chat_id is None else str(self.chat_id)
        user = "-" if self.user_id is None else str(self.user_id)
        return f"{chat}:{user}"


@dataclass(frozen=True)
class RateKey:
    """Composite identity under which a window is tracked.

    Attributes:
        scope_id: Identifier of the scope.
        requester: Requester the event is attributed to.
    """

    scope_id: str
    requester: RequesterIdentity

    @classmethod
    def for_scope(cls, scope: Scope, requester: RequesterIdentity) -> RateKey:
        """Key the requester is counted under for scope."""
        if scope.is_shared:
            return cls(scope.scope_id, RequesterIdentity.global_identity())
        return cls(scope.scope_id, requester)

    def __str__(self) -> str:
        return f"{self.scope_id}|{self.requester.as_key_part()}"
