"""Application services wiring configuration, history and adapters."""
