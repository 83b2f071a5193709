"""
Certificate storage facade.

Combines the object store, the at-rest transform, the local cache and the
advisory lock into the key/value API a certificate manager expects:
load, store, delete, exists, stat, list, lock and unlock.

Cache behaviour:
- load is read-through: cached plaintext is returned as-is, misses are
  fetched, decrypted and cached for the TTL.
- stat caches KeyInfo as JSON under "{key}_ki".
- store and delete do not touch the cache. A load after a store may return
  the previous value until its cache entry expires.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from loguru import logger
from pydantic import ValidationError

from certvault.infrastructure.repositories.object_store import ObjectStore
from certvault.models.errors import (
    AuthenticationFailedError,
    NotFoundError,
    ObjectNotFoundError,
)
from certvault.models.key_info import KeyInfo
from certvault.services.distributed_lock import DistributedLock
from certvault.services.encryption import EncryptionTransform
from certvault.services.local_cache import LocalCache
from certvault.utils.naming import key_info_cache_key, object_name

DEFAULT_CACHE_TTL = 3600


class CertStorage:
    """
    Cached, optionally encrypted key/value storage on an object store.

    Instances are long-lived and shared; the store, cache and lock handles
    are created once (see InfrastructureFactory) and never reopened.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        transform: EncryptionTransform,
        cache: LocalCache,
        locker: DistributedLock,
        prefix: str,
        cache_ttl: float = DEFAULT_CACHE_TTL,
    ):
        """
        Args:
            object_store: Remote object store bound to the bucket
            transform: At-rest encryption transform
            cache: Local cache (may be degraded)
            locker: Advisory lock over the same store
            prefix: Object name prefix
            cache_ttl: Seconds cached payloads and key info stay valid
        """
        self.object_store = object_store
        self.transform = transform
        self.cache = cache
        self.locker = locker
        self.prefix = prefix
        self.cache_ttl = cache_ttl

    def _object_name(self, key: str) -> str:
        return object_name(self.prefix, key)

    async def store(self, key: str, value: bytes) -> None:
        """
        Encrypt and write value under key.

        The local cache is left untouched.
        """
        await self.object_store.put_object(
            self._object_name(key), self.transform.wrap(value)
        )
        logger.debug(f"Stored {key} ({len(value)} bytes)")

    async def load(self, key: str) -> bytes:
        """
        Load the plaintext value of key.

        Raises:
            NotFoundError: If the object is missing or cannot be decrypted
        """
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            stream = await self.object_store.get_object(self._object_name(key))
            value = self.transform.unwrap(stream).read()

        except ObjectNotFoundError as e:
            logger.debug(f"Load of {key}: object missing")
            raise NotFoundError(key, reason="missing") from e

        except AuthenticationFailedError as e:
            logger.warning(f"Load of {key}: stored object is corrupt ({e})")
            raise NotFoundError(key, reason="corrupt") from e

        except Exception as e:
            logger.warning(f"Load of {key}: object unreadable ({e})")
            raise NotFoundError(key, reason="unreadable") from e

        self.cache.set(key, value, self.cache_ttl)
        return value

    async def delete(self, key: str) -> None:
        """Delete key from the object store. The local cache is left untouched."""
        await self.object_store.remove_object(self._object_name(key))
        logger.debug(f"Deleted {key}")

    async def exists(self, key: str) -> bool:
        """Check key exists in the object store, ignoring the cache."""
        try:
            await self.object_store.stat_object(self._object_name(key))
        except ObjectNotFoundError:
            return False
        except Exception as e:
            logger.debug(f"Exists check for {key} failed: {e}")
            return False
        return True

    async def stat(self, key: str) -> KeyInfo:
        """
        Get size and modification time of key.

        Raises:
            ObjectNotFoundError: If the object does not exist
        """
        cache_key = key_info_cache_key(key)
        cached = self.cache.get(cache_key)
        if cached is not None:
            try:
                return KeyInfo.model_validate_json(cached)
            except ValidationError as e:
                logger.warning(f"Ignoring invalid cached key info for {key}: {e}")

        info = await self.object_store.stat_object(self._object_name(key))
        key_info = KeyInfo(
            key=key,
            size=info.size,
            modified=info.last_modified,
            is_terminal=True,
        )

        self.cache.set(
            cache_key, key_info.model_dump_json().encode("utf-8"), self.cache_ttl
        )
        return key_info

    async def list(self, prefix: str, recursive: bool = False) -> list[str]:
        """List object names under prefix."""
        return await self.object_store.list_objects(prefix, recursive)

    async def lock(self, key: str, timeout: float | None = None) -> None:
        """Acquire the advisory lock for key. See DistributedLock.acquire."""
        await self.locker.acquire(key, timeout=timeout)

    async def unlock(self, key: str) -> None:
        """Release the advisory lock for key."""
        await self.locker.release(key)

    @asynccontextmanager
    async def locked(
        self, key: str, timeout: float | None = None
    ) -> AsyncIterator[None]:
        """
        Hold the lock for key for the duration of the block.

        Usage:
            async with storage.locked("certificates/example.com.crt"):
                ...
        """
        await self.lock(key, timeout=timeout)
        try:
            yield
        finally:
            await self.unlock(key)

    def describe(self) -> dict[str, Any]:
        """Summarize the storage configuration for health reporting."""
        return {
            "bucket": self.object_store.bucket_name,
            "prefix": self.prefix,
            "encryption_active": self.transform.active,
            "cache_available": self.cache.available,
            "lock_skip_when_cached": self.locker.skip_when_cached,
        }
