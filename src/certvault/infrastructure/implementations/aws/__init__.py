"""AWS / S3-compatible infrastructure implementations package."""

from certvault.infrastructure.implementations.aws.object_store import S3ObjectStore

__all__ = ["S3ObjectStore"]
