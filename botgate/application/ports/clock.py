"""Clock Protocol - interface for the current instant.

Every component that needs "now" injects a ClockProtocol implementation
instead of calling datetime.now() directly. This keeps window arithmetic
deterministic under test: a clock can be pinned to a fixed instant.

For production:
    Use SystemClock from botgate.application.services.clock_service

For testing:
    Use SystemClock and call set_fixed() / clear_fixed()
"""

from abc import ABC, abstractmethod
from datetime import datetime


class ClockProtocol(ABC):
    """Abstract interface for a time source."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant.

        Returns:
            Timezone-aware datetime in UTC.
        """
        ...
