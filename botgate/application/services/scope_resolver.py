"""Scope Resolver: handler node -> ordered list of active quota scopes."""

from __future__ import annotations

from botgate.domain.models.handler_tree import ScopeNode
from botgate.domain.models.scope import DEFAULT_WINDOW_SECONDS, Scope


class ScopeResolver:
    """Derives the active scopes for a matched handler.

    Stateless and read-only: walks from the handler through each
    enclosing group to the application root and keeps only the nodes that
    declare a limit. The order is most specific first.
    """

    def __init__(self, window_seconds: int = DEFAULT_WINDOW_SECONDS) -> None:
        """Initialize the resolver.

        Args:
            window_seconds: Window duration applied to every scope.
        """
        self._window_seconds = window_seconds

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def resolve(self, handler_node: ScopeNode) -> list[Scope]:
        """Return the throttled scopes of the handler's chain.

        Raises:
            MisconfiguredScopeError: If a node carries a non-positive limit.
        """
        return [
            Scope(
                scope_id=node.scope_id,
                kind=node.kind,
                limit=node.limit,
                window_seconds=self._window_seconds,
            )
            for node in handler_node.ancestors()
            if node.limit is not None
        ]
