"""
Dependency injection for certvault endpoints.

The storage is built once in the lifespan and read back from app.state.
"""

from typing import Annotated

from fastapi import Depends, Request

from certvault.config import Settings, get_settings
from certvault.services.storage import CertStorage

SettingsDep = Annotated[Settings, Depends(get_settings)]
"""Injected Settings instance (cached via lru_cache)."""


def get_storage(request: Request) -> CertStorage:
    """
    Get the process-wide certificate storage.

    Args:
        request: Current request (injected)

    Returns:
        The CertStorage opened at startup
    """
    return request.app.state.storage


StorageDep = Annotated[CertStorage, Depends(get_storage)]
"""Injected CertStorage."""
