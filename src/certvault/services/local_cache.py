"""
Process-wide local cache with TTL expiry.

Backed by an embedded SQLite database so cached certificates survive
restarts. Each entry stores an absolute expiry computed at write time:
    entries(key TEXT PRIMARY KEY, value BLOB, created_at REAL, expires_at REAL)

Expired rows are logically absent and are evicted lazily when read.
The cache knows nothing about certificates or locks.
"""

import sqlite3
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

SCHEMA = """
CREATE TABLE IF NOT EXISTS entries (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL,
    created_at REAL NOT NULL,
    expires_at REAL NOT NULL
)
"""


@dataclass(frozen=True)
class CacheOpenResult:
    """
    Outcome of opening the cache.

    A failed open still yields a usable (degraded) cache that reports every
    key as absent, so the caller decides whether to run cache-less.

    Attributes:
        cache: The cache handle (degraded when error is set)
        error: Exception raised while opening, if any
    """

    cache: "LocalCache"
    error: Exception | None = None

    @property
    def degraded(self) -> bool:
        return self.error is not None


class LocalCache:
    """
    TTL key/value cache over a single SQLite connection.

    One connection is shared across threads and serialized with a lock.
    Construct through LocalCache.open(); a cache built with connection=None
    is the degraded no-op cache.
    """

    def __init__(
        self,
        connection: sqlite3.Connection | None,
        clock: Callable[[], float] = time.time,
    ):
        self._conn = connection
        self._clock = clock
        self._lock = threading.Lock()

    @classmethod
    def open(
        cls, path: str | Path, clock: Callable[[], float] = time.time
    ) -> CacheOpenResult:
        """
        Open (or create) the cache database at path.

        Args:
            path: Database file location
            clock: Time source in epoch seconds

        Returns:
            CacheOpenResult with a live cache, or a degraded one plus the error
        """
        try:
            db_path = Path(path)
            db_path.parent.mkdir(parents=True, exist_ok=True)

            conn = sqlite3.connect(db_path, check_same_thread=False, timeout=5.0)
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(SCHEMA)
            conn.commit()

        except (OSError, sqlite3.Error) as e:
            logger.warning(f"Unable to open local cache at {path}: {e}")
            return CacheOpenResult(cache=cls(None, clock), error=e)

        logger.info(f"Opened local cache at {path}")
        return CacheOpenResult(cache=cls(conn, clock))

    @property
    def available(self) -> bool:
        """True when backed by an open database."""
        return self._conn is not None

    def exists(self, key: str) -> bool:
        """Check whether a live entry exists for key."""
        return self.get(key) is not None

    def get(self, key: str) -> bytes | None:
        """
        Get the cached value for key.

        Returns:
            The value, or None when missing or expired
        """
        if self._conn is None:
            return None

        now = self._clock()
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT value, expires_at FROM entries WHERE key = ?", (key,)
                ).fetchone()

                if row is None:
                    return None

                value, expires_at = row
                if now >= expires_at:
                    self._conn.execute(
                        "DELETE FROM entries WHERE key = ? AND expires_at <= ?",
                        (key, now),
                    )
                    self._conn.commit()
                    return None

            return bytes(value)

        except sqlite3.Error as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None

    def set(self, key: str, value: bytes, ttl: float) -> None:
        """
        Store value under key for ttl seconds.

        Args:
            key: Cache key
            value: Raw bytes to cache
            ttl: Time to live in seconds
        """
        if self._conn is None:
            return

        now = self._clock()
        try:
            with self._lock:
                self._conn.execute(
                    "INSERT OR REPLACE INTO entries (key, value, created_at, expires_at) "
                    "VALUES (?, ?, ?, ?)",
                    (key, sqlite3.Binary(bytes(value)), now, now + ttl),
                )
                self._conn.commit()

        except sqlite3.Error as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    def delete(self, key: str) -> None:
        """Remove key from the cache."""
        if self._conn is None:
            return

        try:
            with self._lock:
                self._conn.execute("DELETE FROM entries WHERE key = ?", (key,))
                self._conn.commit()

        except sqlite3.Error as e:
            logger.warning(f"Cache delete failed for {key}: {e}")

    def purge_expired(self) -> int:
        """
        Delete every expired entry.

        Returns:
            Number of rows removed
        """
        if self._conn is None:
            return 0

        try:
            with self._lock:
                cursor = self._conn.execute(
                    "DELETE FROM entries WHERE expires_at <= ?", (self._clock(),)
                )
                self._conn.commit()
                removed = cursor.rowcount

        except sqlite3.Error as e:
            logger.warning(f"Cache purge failed: {e}")
            return 0

        logger.debug(f"Purged {removed} expired cache entries")
        return removed

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is None:
            return

        with self._lock:
            self._conn.close()
            self._conn = None
