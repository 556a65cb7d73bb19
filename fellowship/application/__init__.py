"""Application layer: use cases and business errors."""
