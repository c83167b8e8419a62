"""Application layer: services orchestrating the boundary adapters."""
