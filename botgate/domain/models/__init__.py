"""Domain models for botgate."""

from botgate.domain.models.chat import Chat, ChatMember, ChatType, InboundMessage, User
from botgate.domain.models.gate_decision import GateDecision, ScopeUsage
from botgate.domain.models.handler_tree import (
    ApplicationNode,
    ContainerNode,
    GroupNode,
    HandlerNode,
    ScopeNode,
)
from botgate.domain.models.rate_window import WindowDecision, WindowRecord
from botgate.domain.models.scope import (
    DEFAULT_WINDOW_SECONDS,
    RateKey,
    RequesterIdentity,
    Scope,
    ScopeKind,
)

__all__: list[str] = [
    "DEFAULT_WINDOW_SECONDS",
    "ApplicationNode",
    "Chat",
    "ChatMember",
    "ChatType",
    "ContainerNode",
    "GateDecision",
    "GroupNode",
    "HandlerNode",
    "InboundMessage",
    "RateKey",
    "RequesterIdentity",
    "Scope",
    "ScopeKind",
    "ScopeNode",
    "ScopeUsage",
    "User",
    "WindowDecision",
    "WindowRecord",
]
