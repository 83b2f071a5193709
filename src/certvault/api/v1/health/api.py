"""
Health check endpoints.

Provides health check endpoints for monitoring service and storage status.
"""

from fastapi import APIRouter

from certvault import __version__
from certvault.api.v1.health.models import HealthResponse, StorageHealthResponse
from certvault.di import StorageDep

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        Service status and version
    """
    return HealthResponse(
        status="ok", version=__version__, message="Service is healthy"
    )


@router.get("/health/storage", response_model=StorageHealthResponse)
async def storage_health_check(storage: StorageDep) -> StorageHealthResponse:
    """
    Storage health endpoint.

    Reports bucket, encryption mode and whether the local cache is usable.
    A missing cache is reported as degraded, not as a failure.

    Returns:
        Storage configuration summary
    """
    details = storage.describe()
    status = "ok" if details["cache_available"] else "degraded"
    return StorageHealthResponse(status=status, **details)
