"""Repository implementations (PostgreSQL and in-memory)."""
