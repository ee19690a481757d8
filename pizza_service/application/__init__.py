"""Application layer: managers (use cases) and the bootstrap admin seed."""
