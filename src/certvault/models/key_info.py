"""Metadata models for stored keys and remote objects."""

from datetime import datetime

from pydantic import BaseModel, Field


class KeyInfo(BaseModel):
    """
    Metadata about a stored key.

    Serialized as JSON when cached locally.
    """

    key: str = Field(..., description="Logical key")
    size: int = Field(..., description="Object size in bytes")
    modified: datetime = Field(..., description="Last modification time")
    is_terminal: bool = Field(
        default=True, description="True for files, False for directories"
    )


class ObjectInfo(BaseModel):
    """Object metadata as reported by the object store."""

    name: str = Field(..., description="Full object name including prefix")
    size: int = Field(..., description="Object size in bytes")
    last_modified: datetime = Field(..., description="Last modification time")
