"""
Advisory lock built on sentinel objects in the object store.

A lock on key K is the object "{prefix}/K.lock" whose body is the RFC3339
time it was taken. Acquisition polls until the sentinel is absent, corrupt
or older than the expiration, then writes a fresh one.

This is not mutual exclusion in the strict sense: reading the sentinel and
writing it are two separate requests, so two acquirers can both see "free"
and both write. The last writer wins. Callers must tolerate that.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from loguru import logger

from certvault.infrastructure.repositories.object_store import ObjectStore
from certvault.models.errors import (
    LockTimeoutError,
    ObjectNotFoundError,
    StoreUnavailableError,
)
from certvault.services.local_cache import LocalCache
from certvault.utils.naming import lock_object_name

DEFAULT_LOCK_EXPIRATION = 15.0
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_LOCK_TIMEOUT = 15.0


def format_lock_timestamp(moment: datetime) -> str:
    """Format a lock timestamp as RFC3339 in UTC, second precision."""
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_lock_timestamp(raw: bytes) -> datetime | None:
    """
    Parse a lock sentinel body.

    Returns:
        Aware datetime, or None if the body is not a timestamp
    """
    try:
        moment = datetime.fromisoformat(raw.decode("utf-8").strip())
    except (UnicodeDecodeError, ValueError):
        return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment


class DistributedLock:
    """
    Polling lock over an ObjectStore.

    States per key: unlocked, locked(ts), and expired once
    ts + expiration has passed. Expired and unparsable sentinels are
    reclaimed by the next acquirer.

    When skip_when_cached is on, a key with a payload in the local cache is
    treated as free and never touches the remote sentinel. That avoids round
    trips for certificates that are only being read, but it also lets a
    writer through while another holds the lock, so it is off by default.
    """

    def __init__(
        self,
        store: ObjectStore,
        prefix: str,
        cache: LocalCache | None = None,
        expiration: float = DEFAULT_LOCK_EXPIRATION,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_LOCK_TIMEOUT,
        skip_when_cached: bool = False,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        """
        Args:
            store: Object store holding the sentinels
            prefix: Object name prefix
            cache: Local cache consulted by the cache shortcut
            expiration: Seconds after which a sentinel is stale
            poll_interval: Seconds between attempts while the lock is held
            timeout: Default acquisition deadline in seconds
            skip_when_cached: Enable the cache shortcut
            clock: Source of the current time for sentinel timestamps
        """
        self.store = store
        self.prefix = prefix
        self.cache = cache
        self.expiration = timedelta(seconds=expiration)
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.skip_when_cached = skip_when_cached
        self._clock = clock

    def _cache_shortcut(self, key: str) -> bool:
        return (
            self.skip_when_cached
            and self.cache is not None
            and self.cache.exists(key)
        )

    async def acquire(self, key: str, timeout: float | None = None) -> None:
        """
        Acquire the lock for key.

        The deadline bounds every remote call as well as the wait between
        attempts. Cancelling the calling task aborts the wait.

        Args:
            key: Logical key
            timeout: Deadline in seconds, defaults to the configured timeout

        Raises:
            LockTimeoutError: If the lock is still held at the deadline
        """
        if self._cache_shortcut(key):
            logger.debug(f"Lock for {key} skipped, payload is cached")
            return

        timeout = self.timeout if timeout is None else timeout
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        name = lock_object_name(self.prefix, key)

        while True:
            try:
                async with asyncio.timeout_at(deadline):
                    if await self._try_acquire(key, name):
                        return

            except TimeoutError as e:
                logger.warning(f"Timed out talking to the store for lock on {key}")
                raise LockTimeoutError(key, timeout) from e

            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.warning(f"Timed out waiting for lock on {key}")
                raise LockTimeoutError(key, timeout)

            await asyncio.sleep(min(self.poll_interval, remaining))

    async def _try_acquire(self, key: str, name: str) -> bool:
        """Make one attempt. Returns False while the lock is held."""
        try:
            raw = (await self.store.get_object(name)).read()

        except ObjectNotFoundError:
            pass

        except StoreUnavailableError as e:
            logger.warning(f"Reading lock for {key} failed, retrying: {e}")
            return False

        except Exception as e:
            # S3 answers AccessDenied for missing keys without s3:ListBucket
            logger.warning(f"Reading lock for {key} failed, treating as free: {e}")

        else:
            locked_at = parse_lock_timestamp(raw)
            if locked_at is None:
                logger.warning(f"Lock for {key} is corrupt, overwriting")
            elif locked_at + self.expiration < self._clock():
                logger.info(f"Lock for {key} expired at {locked_at}, reclaiming")
            else:
                return False

        await self._put_lock(name)
        logger.debug(f"Acquired lock for {key}")
        return True

    async def _put_lock(self, name: str) -> None:
        body = format_lock_timestamp(self._clock()).encode("utf-8")
        await self.store.put_object(name, body)

    async def release(self, key: str) -> None:
        """
        Release the lock for key by deleting its sentinel.

        Deletion errors propagate and are not retried.
        """
        if self._cache_shortcut(key):
            return

        await self.store.remove_object(lock_object_name(self.prefix, key))
        logger.debug(f"Released lock for {key}")
