"""Identity: users, role bindings, tokens, passwords and authorization policy."""
