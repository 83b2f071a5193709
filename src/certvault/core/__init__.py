"""Core cross-cutting concerns (logging)."""
