"""Handler registration tree.

Handlers are registered through fluent calls and grouped into nested
containers. Every node may declare its own throttle; the scope resolver
walks from a handler up through its parents to the application root.

The container owns its children; each child keeps a plain back-reference
to its container so the resolver can walk upward.

Usage:
    root = ApplicationNode().throttle(4)
    root.on_text("start", start_handler)
    admin = root.group(lambda g: g.on_text("ban", ban_handler)).throttle(3)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from typing import Any, TypeVar

from botgate.domain.errors.rate_limit import MisconfiguredScopeError
from botgate.domain.models.scope import ScopeKind

HandlerCallback = Callable[[Any], Awaitable[None]]

_NodeT = TypeVar("_NodeT", bound="ScopeNode")


class ScopeNode:
    """Base node of the routing tree.

    Attributes:
        kind: Level of the node (handler, group, global).
        limit: Configured hit quota, None when the node is not throttled.
    """

    kind: ScopeKind

    def __init__(self, name: str | None = None) -> None:
        self._name = name
        self._parent: ContainerNode | None = None
        self._index = 0
        self.limit: int | None = None

    @property
    def parent(self) -> ContainerNode | None:
        """Enclosing container, None for the root or a detached node."""
        return self._parent

    def _attach(self, parent: ContainerNode, index: int) -> None:
        self._parent = parent
        self._index = index

    @property
    def scope_id(self) -> str:
        """Stable identifier derived from the node's position in the tree.

        An explicit name replaces the positional segment, which keeps keys
        stable when registration order changes.
        """
        segment = self._name if self._name is not None else f"{self.kind.value}:{self._index}"
        parent = self.parent
        if parent is None:
            return segment
        return f"{parent.scope_id}/{segment}"

    def throttle(self: _NodeT, limit: int) -> _NodeT:
        """Limit events passing through this node to `limit` per window.

        Raises:
            MisconfiguredScopeError: If limit is not positive.
        """
        if limit < 1:
            raise MisconfiguredScopeError(self.scope_id, limit, None)
        self.limit = limit
        return self

    def ancestors(self) -> Iterator[ScopeNode]:
        """Yield this node followed by every enclosing container."""
        node: ScopeNode | None = self
        while node is not None:
            yield node
            node = node.parent


class HandlerNode(ScopeNode):
    """A leaf handler matched on exact message text.

    Attributes:
        pattern: Text the inbound message must equal.
        callback: Coroutine function invoked with the event context.
    """

    kind = ScopeKind.HANDLER

    def __init__(self, pattern: str, callback: HandlerCallback, name: str | None = None) -> None:
        super().__init__(name)
        self.pattern = pattern
        self.callback = callback

    def matches(self, text: str) -> bool:
        return text == self.pattern

    def __repr__(self) -> str:
        return f"HandlerNode(pattern={self.pattern!r}, limit={self.limit})"


class ContainerNode(ScopeNode):
    """A node holding handlers and nested groups."""

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name)
        self._children: list[ScopeNode] = []

    @property
    def children(self) -> tuple[ScopeNode, ...]:
        return tuple(self._children)

    def _add(self, child: ScopeNode) -> None:
        child._attach(self, len(self._children))
        self._children.append(child)

    def on_text(
        self, pattern: str, callback: HandlerCallback, name: str | None = None
    ) -> HandlerNode:
        """Register a handler for messages whose text equals pattern."""
        handler = HandlerNode(pattern, callback, name=name)
        self._add(handler)
        return handler

    def group(
        self, builder: Callable[[GroupNode], None], name: str | None = None
    ) -> GroupNode:
        """Create a nested group and let builder register its children."""
        group = GroupNode(name=name)
        self._add(group)
        builder(group)
        return group

    def iter_handlers(self) -> Iterator[HandlerNode]:
        """Yield handlers depth-first in registration order."""
        for child in self._children:
            if isinstance(child, HandlerNode):
                yield child
            elif isinstance(child, ContainerNode):
                yield from child.iter_handlers()

    def find_handler(self, text: str) -> HandlerNode | None:
        """Return the first registered handler matching text."""
        return next((h for h in self.iter_handlers() if h.matches(text)), None)


class GroupNode(ContainerNode):
    """A group of handlers sharing a throttle scope."""

    kind = ScopeKind.GROUP


class ApplicationNode(ContainerNode):
    """Root of the routing tree; its throttle applies to every handler."""

    kind = ScopeKind.GLOBAL

    def __init__(self, name: str = "app") -> None:
        super().__init__(name)

