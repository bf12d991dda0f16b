"""Test helpers for botgate tests.

Helpers:
    PinnedClocks: Pins the gate clock and the store clock together

Usage:
    from tests.helpers import PinnedClocks
"""

from tests.helpers.pinned_clocks import PinnedClocks

__all__ = ["PinnedClocks"]
