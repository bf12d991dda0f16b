"""Rate limiting errors for the throttle gate.

Two failure classes exist in the rate limiting core:

- StoreUnavailableError: the counter store could not complete a read or
  write. The gate never guesses an outcome on this error; it is raised
  to the dispatcher which owns the fail-open/fail-closed policy.
- MisconfiguredScopeError: a scope declares a non-positive limit or
  window. Detected at registration time; raised again by the gate if a
  bad scope slips through.
"""

from botgate.domain.exceptions import BotgateError


class StoreUnavailableError(BotgateError):
    """Raised when the counter store cannot complete an operation.

    Attributes:
        key: The store key being accessed, if known.
        operation: Name of the store operation that failed.
    """

    def __init__(self, operation: str, key: str | None = None, reason: str = "") -> None:
        """Initialize store unavailable error.

        Args:
            operation: Store operation that failed (e.g. "update_window").
            key: Store key involved in the operation.
            reason: Backend-specific failure description.
        """
        self.operation = operation
        self.key = key
        message = f"Counter store unavailable during {operation}"
        if key is not None:
            message += f" (key={key})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class MisconfiguredScopeError(BotgateError):
    """Raised when a scope declares a non-positive limit or window.

    Attributes:
        scope_id: Identifier of the misconfigured scope.
        limit: The configured hit quota.
        window_seconds: The configured window duration.
    """

    def __init__(self, scope_id: str, limit: int | None, window_seconds: int | None) -> None:
        self.scope_id = scope_id
        self.limit = limit
        self.window_seconds = window_seconds
        super().__init__(
            f"Scope {scope_id!r} is misconfigured: limit={limit}, "
            f"window_seconds={window_seconds} (both must be positive)"
        )
