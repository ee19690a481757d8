"""Infrastructure adapters: PostgreSQL, in-memory persistence and the factory client."""
