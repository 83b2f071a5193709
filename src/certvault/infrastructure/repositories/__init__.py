"""Abstract repository interfaces for infrastructure operations."""

from certvault.infrastructure.repositories.object_store import ObjectStore

__all__ = ["ObjectStore"]
