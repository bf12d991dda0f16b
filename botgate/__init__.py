"""
botgate - Hierarchical rate limiting for chat-bot event handlers

Inbound events are routed to handlers organized in nested scopes
(handler, group, application). Each scope may declare its own quota;
the throttle gate enforces every quota in the chain of the matched
handler and warns a throttled caller only once per window.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
