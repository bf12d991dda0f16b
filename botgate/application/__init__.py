"""Application layer: ports and services of the throttle core."""
