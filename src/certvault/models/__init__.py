"""Domain models and error types."""

from certvault.models.errors import (
    AuthenticationFailedError,
    BucketMissingError,
    CacheUnavailableError,
    InvalidKeyLengthError,
    LockTimeoutError,
    NotFoundError,
    ObjectNotFoundError,
    StorageError,
    StoreUnavailableError,
)
from certvault.models.key_info import KeyInfo, ObjectInfo

__all__ = [
    "AuthenticationFailedError",
    "BucketMissingError",
    "CacheUnavailableError",
    "InvalidKeyLengthError",
    "KeyInfo",
    "LockTimeoutError",
    "NotFoundError",
    "ObjectInfo",
    "ObjectNotFoundError",
    "StorageError",
    "StoreUnavailableError",
]
