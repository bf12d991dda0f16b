"""Domain errors for botgate."""

from botgate.domain.errors.rate_limit import (
    MisconfiguredScopeError,
    StoreUnavailableError,
)
from botgate.domain.exceptions import BotgateError

__all__: list[str] = [
    "BotgateError",
    "MisconfiguredScopeError",
    "StoreUnavailableError",
]
