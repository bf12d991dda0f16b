"""Infrastructure layer: store backends, stubs, observability."""
