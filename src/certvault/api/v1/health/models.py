"""Health check response models."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="ok", description="Service status")
    version: str = Field(..., description="Service version")
    message: str | None = Field(None, description="Optional status message")


class StorageHealthResponse(BaseModel):
    """Certificate storage status."""

    status: str = Field(default="ok", description="ok, or degraded without cache")
    bucket: str = Field(..., description="Bucket name")
    prefix: str = Field(..., description="Object name prefix")
    encryption_active: bool = Field(..., description="At-rest encryption enabled")
    cache_available: bool = Field(..., description="Local cache is open")
    lock_skip_when_cached: bool = Field(
        ..., description="Lock shortcut for cached keys enabled"
    )
