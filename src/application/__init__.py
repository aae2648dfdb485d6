"""Application layer: ports, use cases and live streams."""
