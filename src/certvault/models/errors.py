"""
Storage error hierarchy.

Every error raised by certvault derives from StorageError. Object stores
raise StoreUnavailableError when the backend cannot be reached or asks the
caller to back off. Other errors raised by the remote object store itself
(botocore.exceptions.ClientError) are not wrapped and propagate verbatim
from delete, stat and list.
"""


class StorageError(Exception):
    """Base class for certvault errors."""


class NotFoundError(StorageError, FileNotFoundError):
    """
    A key could not be loaded.

    Raised for missing objects and for objects that cannot be decrypted.
    The reason is kept for logging only; callers see a single condition.

    Attributes:
        key: Logical key that was requested
        reason: Internal cause ("missing", "corrupt", "unreadable")
    """

    def __init__(self, key: str, reason: str = "missing"):
        super().__init__(f"key not found: {key}")
        self.key = key
        self.reason = reason


class ObjectNotFoundError(StorageError):
    """The object store has no object under the given name."""

    def __init__(self, name: str):
        super().__init__(f"object does not exist: {name}")
        self.name = name


class StoreUnavailableError(StorageError):
    """The object store is unreachable or asked the caller to back off."""

    def __init__(self, name: str):
        super().__init__(f"object store unavailable while accessing {name}")
        self.name = name


class InvalidKeyLengthError(StorageError, ValueError):
    """Encryption key is present but not exactly 32 bytes."""

    def __init__(self, length: int, expected: int = 32):
        super().__init__(
            f"encryption key must have exactly {expected} bytes, got {length}"
        )
        self.length = length


class AuthenticationFailedError(StorageError):
    """Ciphertext failed integrity verification or is malformed."""


class BucketMissingError(StorageError):
    """The configured bucket does not exist."""

    def __init__(self, bucket: str):
        super().__init__(f"S3 bucket {bucket} does not exist")
        self.bucket = bucket


class LockTimeoutError(StorageError, TimeoutError):
    """Lock could not be acquired before the deadline."""

    def __init__(self, key: str, timeout: float):
        super().__init__(f"acquiring lock for {key} failed after {timeout}s")
        self.key = key
        self.timeout = timeout


class CacheUnavailableError(StorageError):
    """The local cache could not be opened and a cache is required."""
