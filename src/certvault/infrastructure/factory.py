"""
Infrastructure factory for storage assembly.

Selects the object store implementation and wires the transform, cache and
lock into a CertStorage:
- s3: boto3 against AWS or any S3-compatible endpoint
- local: file-based object store for development

Usage:
    from certvault.config import get_settings
    from certvault.infrastructure import InfrastructureFactory

    factory = InfrastructureFactory.from_settings(get_settings())
    storage = await factory.create_storage()
"""

from typing import TYPE_CHECKING, Literal

from loguru import logger

from certvault.infrastructure.repositories import ObjectStore
from certvault.models.errors import BucketMissingError, CacheUnavailableError

if TYPE_CHECKING:
    from certvault.config import Settings
    from certvault.services.local_cache import LocalCache
    from certvault.services.storage import CertStorage

ObjectStoreProvider = Literal["s3", "local"]


class InfrastructureFactory:
    """
    Factory for the object store and the storage facade built on it.

    Construction errors (bad key length, missing bucket, client failure)
    are raised from create_storage and are meant to abort startup.
    """

    def __init__(self, provider: ObjectStoreProvider | None = None, **config):
        """
        Initialize infrastructure factory.

        Args:
            provider: Object store provider ("s3", "local").
                     If None, uses "s3" as default.
            **config: Provider-specific and storage configuration options

        Example:
            factory = InfrastructureFactory(
                provider="local",
                base_dir="/tmp/objects",
                bucket="certs",
                prefix="acme",
            )
        """
        if provider is None:
            provider = "s3"

        self.provider = provider
        self.config = config

        logger.info(f"Initialized InfrastructureFactory with provider: {provider}")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "InfrastructureFactory":
        """
        Create factory from Settings object.

        Args:
            settings: Application settings from config.py

        Returns:
            InfrastructureFactory configured from settings
        """
        config = {
            "bucket": settings.s3_bucket,
            "base_dir": settings.local_store_dir,
            "endpoint": settings.s3_endpoint,
            "access_key_id": settings.s3_access_key_id,
            "secret_access_key": settings.s3_secret_access_key,
            "region": settings.s3_region,
            "secure": settings.s3_secure,
            "bucket_check_timeout": settings.bucket_check_timeout_seconds,
            "prefix": settings.object_prefix,
            "encryption_key": settings.get_encryption_key(),
            "cache_path": settings.cache_path,
            "cache_ttl": settings.cache_ttl_seconds,
            "cache_required": settings.cache_required,
            "lock_expiration": settings.lock_expiration_seconds,
            "lock_poll_interval": settings.lock_poll_interval_seconds,
            "lock_timeout": settings.lock_timeout_seconds,
            "lock_skip_when_cached": settings.lock_skip_when_cached,
        }

        return cls(provider=settings.object_store_provider, **config)

    def get_object_store(self) -> ObjectStore:
        """
        Get object store for configured provider.

        Returns:
            ObjectStore implementation

        Raises:
            ValueError: If provider is not supported
        """
        bucket = self.config.get("bucket", "certvault-certificates")

        if self.provider == "local":
            from certvault.infrastructure.implementations.local import (
                LocalObjectStore,
            )

            base_dir = self.config.get("base_dir", "./.local_infrastructure/objects")
            return LocalObjectStore(bucket_name=bucket, base_dir=base_dir)

        elif self.provider == "s3":
            from certvault.infrastructure.implementations.aws import S3ObjectStore

            return S3ObjectStore(
                bucket_name=bucket,
                endpoint=self.config.get("endpoint", ""),
                access_key_id=self.config.get("access_key_id", ""),
                secret_access_key=self.config.get("secret_access_key", ""),
                region_name=self.config.get("region", "us-east-1"),
                secure=self.config.get("secure", True),
                bucket_check_timeout=self.config.get("bucket_check_timeout", 5.0),
            )

        else:
            raise ValueError(f"Unsupported provider: {self.provider}")

    def get_local_cache(self) -> "LocalCache":
        """
        Open the local cache.

        Returns:
            Live cache, or a degraded one when opening failed and the cache
            is not required

        Raises:
            CacheUnavailableError: If opening failed and cache_required is set
        """
        from certvault.services.local_cache import LocalCache

        result = LocalCache.open(
            self.config.get("cache_path", "/tmp/certvault-cache/cache.db")
        )

        if result.degraded:
            if self.config.get("cache_required", False):
                raise CacheUnavailableError(
                    f"local cache unavailable: {result.error}"
                ) from result.error
            logger.warning("Running without local cache")

        return result.cache

    async def create_storage(self) -> "CertStorage":
        """
        Build a CertStorage from the configuration.

        Returns:
            Ready-to-use storage facade

        Raises:
            InvalidKeyLengthError: If the encryption key is not 32 bytes
            BucketMissingError: If the bucket does not exist
            CacheUnavailableError: If the cache is required but cannot open
        """
        from certvault.services.distributed_lock import DistributedLock
        from certvault.services.encryption import build_transform
        from certvault.services.storage import CertStorage

        transform = build_transform(self.config.get("encryption_key"))

        object_store = self.get_object_store()
        if not await object_store.bucket_exists():
            raise BucketMissingError(object_store.bucket_name)

        cache = self.get_local_cache()
        prefix = self.config.get("prefix", "certvault")

        locker = DistributedLock(
            object_store,
            prefix,
            cache=cache,
            expiration=self.config.get("lock_expiration", 15.0),
            poll_interval=self.config.get("lock_poll_interval", 1.0),
            timeout=self.config.get("lock_timeout", 15.0),
            skip_when_cached=self.config.get("lock_skip_when_cached", False),
        )

        return CertStorage(
            object_store,
            transform,
            cache,
            locker,
            prefix,
            cache_ttl=self.config.get("cache_ttl", 3600),
        )
