"""User accounts, sessions and role checks."""
