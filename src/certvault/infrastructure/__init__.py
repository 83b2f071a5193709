"""
Infrastructure abstraction layer for the remote object store.

This module provides the object store interface and implementations:
- s3: boto3 against AWS S3 or any S3-compatible endpoint
- local: File-based storage for development

The factory assembles them into a CertStorage.
"""

from certvault.infrastructure.factory import InfrastructureFactory

__all__ = ["InfrastructureFactory"]
