"""Domain layer: entities and pure policies."""
