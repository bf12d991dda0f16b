"""Configuration for botgate."""

from botgate.config.throttle_config import DEFAULT_THROTTLE_CONFIG, ThrottleConfig

__all__: list[str] = ["DEFAULT_THROTTLE_CONFIG", "ThrottleConfig"]
