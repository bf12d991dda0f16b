"""Throttle configuration.

All values can be overridden via environment variables.

Environment Variables:
- BOTGATE_THROTTLE_WINDOW_SECONDS: Window duration for every scope (default: 60)
- BOTGATE_STORE_BACKEND: "memory" or "redis" (default: memory)
- BOTGATE_REDIS_URL: Redis connection URL (default: redis://localhost:6379/0)
- BOTGATE_REDIS_KEY_PREFIX: Namespace for Redis keys (default: botgate:throttle)
- BOTGATE_REDIS_SOCKET_TIMEOUT: Redis socket timeout in seconds (default: 2.0)
- BOTGATE_REDIS_MAX_TRANSACTION_RETRIES: WATCH conflicts per update (default: 5)
- BOTGATE_FAIL_OPEN: Run handlers when the store is down (default: false)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

STORE_BACKENDS = ("memory", "redis")


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ThrottleConfig:
    """Configuration for the throttle gate and its counter store.

    Attributes:
        window_seconds: Fixed window duration shared by every scope.
        store_backend: Counter store implementation ("memory" or "redis").
        redis_url: Redis connection URL (redis backend only).
        redis_key_prefix: Namespace for Redis keys.
        redis_socket_timeout: Socket timeout for Redis calls, in seconds.
        redis_max_transaction_retries: Optimistic transaction attempts.
        fail_open: Run handlers when the counter store is unavailable.
    """

    window_seconds: int = 60
    store_backend: str = "memory"
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "botgate:throttle"
    redis_socket_timeout: float = 2.0
    redis_max_transaction_retries: int = 5
    fail_open: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.window_seconds < 1:
            raise ValueError(f"window_seconds must be positive, got {self.window_seconds}")
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"store_backend must be one of {STORE_BACKENDS}, got {self.store_backend!r}"
            )
        if self.redis_socket_timeout <= 0:
            raise ValueError(
                f"redis_socket_timeout must be positive, got {self.redis_socket_timeout}"
            )
        if self.redis_max_transaction_retries < 1:
            raise ValueError(
                "redis_max_transaction_retries must be at least 1, "
                f"got {self.redis_max_transaction_retries}"
            )

    @classmethod
    def from_environment(cls) -> ThrottleConfig:
        """Create config from environment variables with defaults."""
        defaults = cls()
        return cls(
            window_seconds=_get_int_env("BOTGATE_THROTTLE_WINDOW_SECONDS", defaults.window_seconds),
            store_backend=os.environ.get("BOTGATE_STORE_BACKEND", defaults.store_backend).lower(),
            redis_url=os.environ.get("BOTGATE_REDIS_URL", defaults.redis_url),
            redis_key_prefix=os.environ.get("BOTGATE_REDIS_KEY_PREFIX", defaults.redis_key_prefix),
            redis_socket_timeout=_get_float_env(
                "BOTGATE_REDIS_SOCKET_TIMEOUT", defaults.redis_socket_timeout
            ),
            redis_max_transaction_retries=_get_int_env(
                "BOTGATE_REDIS_MAX_TRANSACTION_RETRIES", defaults.redis_max_transaction_retries
            ),
            fail_open=_get_bool_env("BOTGATE_FAIL_OPEN", defaults.fail_open),
        )


# Default configuration instance
DEFAULT_THROTTLE_CONFIG = ThrottleConfig()
