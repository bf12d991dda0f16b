"""Domain layer for botgate: value objects, scope tree and errors."""
