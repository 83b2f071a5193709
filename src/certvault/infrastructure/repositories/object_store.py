"""
Abstract interface for the remote object store.

The storage facade only needs a handful of bucket-scoped operations:
- Bucket existence check (startup)
- Object get/put/remove
- Object metadata (size, last modified)
- Listing by prefix
"""

from abc import ABC, abstractmethod
from typing import BinaryIO

from certvault.models.key_info import ObjectInfo


class ObjectStore(ABC):
    """
    Abstract interface for object store operations.

    Implementations are bound to a single bucket at construction and must
    raise ObjectNotFoundError when an object does not exist.
    """

    bucket_name: str

    @abstractmethod
    async def bucket_exists(self) -> bool:
        """
        Check whether the configured bucket exists.

        Returns:
            True if the bucket exists, False otherwise
        """
        pass

    @abstractmethod
    async def get_object(self, name: str) -> BinaryIO:
        """
        Open an object for reading.

        Args:
            name: Full object name

        Returns:
            Readable binary stream with the object body

        Raises:
            ObjectNotFoundError: If the object does not exist
        """
        pass

    @abstractmethod
    async def put_object(self, name: str, data: bytes) -> None:
        """
        Write an object, replacing any existing one.

        Args:
            name: Full object name
            data: Object body
        """
        pass

    @abstractmethod
    async def remove_object(self, name: str) -> None:
        """
        Remove an object.

        Args:
            name: Full object name
        """
        pass

    @abstractmethod
    async def stat_object(self, name: str) -> ObjectInfo:
        """
        Get object metadata.

        Args:
            name: Full object name

        Returns:
            Object size and modification time

        Raises:
            ObjectNotFoundError: If the object does not exist
        """
        pass

    @abstractmethod
    async def list_objects(self, prefix: str, recursive: bool) -> list[str]:
        """
        List object names under a prefix.

        Args:
            prefix: Name prefix to filter on
            recursive: If False, stop at the next "/" delimiter

        Returns:
            Object names (directories end with "/" when not recursive)
        """
        pass
