"""Storage services: encryption, local cache, lock and the storage facade."""

from certvault.services.distributed_lock import DistributedLock
from certvault.services.encryption import (
    AESGCMTransform,
    CleartextTransform,
    EncryptionTransform,
    build_transform,
)
from certvault.services.local_cache import CacheOpenResult, LocalCache
from certvault.services.storage import CertStorage

__all__ = [
    "AESGCMTransform",
    "CacheOpenResult",
    "CertStorage",
    "CleartextTransform",
    "DistributedLock",
    "EncryptionTransform",
    "LocalCache",
    "build_transform",
]
