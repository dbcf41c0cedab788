"""Infrastructure layer: configuration sources and backend adapters."""
