"""Tests for configuration settings."""

from unittest.mock import patch

from certvault.config import Settings


def test_defaults():
    """Test lock and cache defaults."""
    settings = Settings(_env_file=None)

    assert settings.cache_ttl_seconds == 3600
    assert settings.lock_expiration_seconds == 15
    assert settings.lock_poll_interval_seconds == 1
    assert settings.lock_timeout_seconds == 15
    assert settings.lock_skip_when_cached is False
    assert settings.bucket_check_timeout_seconds == 5


def test_encryption_key_empty_is_none():
    """Test an empty key disables encryption."""
    with patch.dict("os.environ", {"ENCRYPTION_KEY": ""}):
        settings = Settings(_env_file=None)

    assert settings.get_encryption_key() is None


def test_encryption_key_from_environment():
    """Test the key is read from the environment as bytes."""
    with patch.dict(
        "os.environ", {"ENCRYPTION_KEY": "supersecretkeyofexactly32bytes!!"}
    ):
        settings = Settings(_env_file=None)

    assert settings.get_encryption_key() == b"supersecretkeyofexactly32bytes!!"
