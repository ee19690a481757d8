"""Domain layer: entities and persistence ports (no infrastructure imports)."""
