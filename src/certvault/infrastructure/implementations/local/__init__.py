"""Local file-based infrastructure implementations for development."""

from certvault.infrastructure.implementations.local.object_store import (
    LocalObjectStore,
)

__all__ = ["LocalObjectStore"]
