"""Global pytest configuration and fixtures for all tests."""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from certvault.config import get_settings
from certvault.infrastructure.implementations.local import LocalObjectStore
from certvault.services.local_cache import LocalCache


@pytest.fixture(scope="session", autouse=True)
def set_test_env_vars():
    """
    Set environment variables for testing.

    Points the storage at a local object store and a throwaway cache so
    tests never reach a real bucket.
    """
    original_env = {}
    base_dir = tempfile.mkdtemp(prefix="certvault-tests-")

    test_env_vars = {
        "OBJECT_STORE_PROVIDER": "local",
        "LOCAL_STORE_DIR": os.path.join(base_dir, "objects"),
        "S3_BUCKET": "test-bucket",
        "OBJECT_PREFIX": "test-prefix",
        "CACHE_PATH": os.path.join(base_dir, "cache", "cache.db"),
        "ENCRYPTION_KEY": "",
        "LOG_LEVEL": "DEBUG",
    }

    for key, value in test_env_vars.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value
    get_settings.cache_clear()

    yield

    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value
    get_settings.cache_clear()
    shutil.rmtree(base_dir, ignore_errors=True)


class FakeClock:
    """Controllable epoch-seconds clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def clock():
    """Fake clock for cache expiry."""
    return FakeClock()


@pytest.fixture
def object_store(temp_dir):
    """Local object store bound to a test bucket."""
    return LocalObjectStore(bucket_name="certs", base_dir=str(temp_dir / "objects"))


@pytest.fixture
def cache(temp_dir, clock):
    """Open local cache driven by the fake clock."""
    result = LocalCache.open(temp_dir / "cache" / "cache.db", clock=clock)
    assert not result.degraded
    yield result.cache
    result.cache.close()
