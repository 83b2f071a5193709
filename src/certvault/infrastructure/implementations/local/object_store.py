"""
Local file-based object store implementation.

Stores objects in a local directory structure:
    {base_dir}/
        {bucket}/
            {object name}

WARNING: For development and tests only. There is no cross-process
consistency beyond what the filesystem provides.
"""

import io
from datetime import UTC, datetime
from pathlib import Path
from typing import BinaryIO

from loguru import logger

from certvault.infrastructure.repositories.object_store import ObjectStore
from certvault.models.errors import ObjectNotFoundError, StoreUnavailableError
from certvault.models.key_info import ObjectInfo

TEMP_SUFFIX = ".certvault-tmp"


class LocalObjectStore(ObjectStore):
    """
    File-based object store for local development.

    A bucket is a directory under base_dir; object names map to relative
    paths, so "prefix/cert/a.crt" becomes {bucket}/prefix/cert/a.crt.
    """

    def __init__(
        self,
        bucket_name: str,
        base_dir: str = "./.local_infrastructure/objects",
        auto_create_bucket: bool = True,
    ):
        """
        Initialize local object store.

        Args:
            bucket_name: Bucket (directory) name
            base_dir: Base directory holding bucket directories
            auto_create_bucket: Create the bucket directory if missing
        """
        self.bucket_name = bucket_name
        self.base_dir = Path(base_dir)
        self.bucket_dir = self.base_dir / bucket_name

        if auto_create_bucket:
            self.bucket_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"Initialized LocalObjectStore at {self.bucket_dir}")

    def _object_path(self, name: str) -> Path:
        """
        Get path to object file.

        Handles nested names by creating subdirectories on write.
        """
        path = (self.bucket_dir / name.lstrip("/")).resolve()
        if not path.is_relative_to(self.bucket_dir.resolve()):
            raise ValueError(f"Object name escapes bucket: {name}")
        return path

    async def bucket_exists(self) -> bool:
        """Check the bucket directory exists."""
        return self.bucket_dir.is_dir()

    async def get_object(self, name: str) -> BinaryIO:
        """Read object from disk."""
        path = self._object_path(name)

        if not path.is_file():
            raise ObjectNotFoundError(name)

        try:
            return io.BytesIO(path.read_bytes())
        except OSError as e:
            raise StoreUnavailableError(name) from e

    async def put_object(self, name: str, data: bytes) -> None:
        """Write object to disk."""
        path = self._object_path(name)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write then rename so readers never see a partial object
        tmp_path = _temp_path(path)
        try:
            tmp_path.write_bytes(data)
            tmp_path.replace(path)
        except OSError as e:
            raise StoreUnavailableError(name) from e

        logger.debug(f"Stored object: {name} ({len(data)} bytes)")

    async def remove_object(self, name: str) -> None:
        """Delete object from disk. Missing objects are ignored, like S3."""
        path = self._object_path(name)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreUnavailableError(name) from e

        logger.debug(f"Deleted object: {name}")

    async def stat_object(self, name: str) -> ObjectInfo:
        """Read size and mtime of an object."""
        path = self._object_path(name)

        if not path.is_file():
            raise ObjectNotFoundError(name)

        st = path.stat()
        return ObjectInfo(
            name=name,
            size=st.st_size,
            last_modified=datetime.fromtimestamp(st.st_mtime, tz=UTC),
        )

    async def list_objects(self, prefix: str, recursive: bool) -> list[str]:
        """List objects whose names start with prefix."""
        names = set()

        for path in self.bucket_dir.rglob("*"):
            if not path.is_file() or _is_temp_path(path):
                continue

            name = path.relative_to(self.bucket_dir).as_posix()
            if not name.startswith(prefix):
                continue

            if not recursive:
                rest = name[len(prefix) :]
                if "/" in rest:
                    # Collapse to the common prefix, S3 delimiter style
                    name = prefix + rest.split("/", 1)[0] + "/"

            names.add(name)

        return sorted(names)


def _temp_path(path: Path) -> Path:
    return path.with_name(f".{path.name}{TEMP_SUFFIX}")


def _is_temp_path(path: Path) -> bool:
    return path.name.startswith(".") and path.name.endswith(TEMP_SUFFIX)
