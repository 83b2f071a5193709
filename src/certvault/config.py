"""
Application configuration and environment variables.

This module unifies configuration using pydantic-settings.
Variables can come from:
1. .env file
2. System environment variables (have priority)
3. Default values

Naming convention:
- In Python code: snake_case (s3_bucket)
- In .env or ENV vars: UPPER_CASE (S3_BUCKET)
- Pydantic automatically converts between both
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Unified storage configuration.

    All variables can be defined in:
    - .env file: VARIABLE_NAME=value
    - Environment variables: export VARIABLE_NAME=value

    Example:
        # In .env or as environment variable:
        S3_ENDPOINT=very-cool.s3.backblazeb2.com
        S3_BUCKET=your-crypto-bucket
        ENCRYPTION_KEY=supersecretkeyofexactly32bytes!!
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allows using uppercase or lowercase
        extra="ignore",  # Ignores extra variables in .env
    )

    # ============================================================================
    # PROJECT SETTINGS
    # ============================================================================
    project_name: str = Field(default="certvault", description="Project name")
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # ============================================================================
    # LOGGING SETTINGS
    # ============================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",  # noqa: E501
        description="Log format",
    )
    logger_enqueue: bool = Field(
        default=False, description="Enqueue logs using multiprocessing"
    )

    # ============================================================================
    # OBJECT STORE SETTINGS
    # ============================================================================
    object_store_provider: str = Field(
        default="s3",
        description="Object store provider (s3, local)",
    )
    local_store_dir: str = Field(
        default="./.local_infrastructure/objects",
        description="Base directory for the local object store (development only)",
    )
    s3_endpoint: str = Field(
        default="", description="S3-compatible endpoint host (empty for AWS)"
    )
    s3_bucket: str = Field(
        default="certvault-certificates",
        description="Bucket holding certificates, keys and lock sentinels",
    )
    s3_access_key_id: str = Field(default="", description="S3 access key ID")
    s3_secret_access_key: str = Field(default="", description="S3 secret key")
    s3_region: str = Field(default="us-east-1", description="S3 region")
    s3_secure: bool = Field(default=True, description="Use HTTPS for the endpoint")
    object_prefix: str = Field(
        default="certvault",
        description="Prefix prepended to every object name",
    )
    bucket_check_timeout_seconds: float = Field(
        default=5.0, description="Timeout for the startup bucket-exists check"
    )

    # ============================================================================
    # ENCRYPTION SETTINGS
    # ============================================================================
    encryption_key: str = Field(
        default="",
        description="Optional 32-byte key; leave empty for cleartext storage",
    )

    # ============================================================================
    # CACHE SETTINGS
    # ============================================================================
    cache_path: str = Field(
        default="/tmp/certvault-cache/cache.db",
        description="Location of the embedded local cache database",
    )
    cache_ttl_seconds: int = Field(
        default=3600, description="TTL for cached payloads and key info"
    )
    cache_required: bool = Field(
        default=False,
        description="Fail startup instead of running cache-less when the cache cannot open",
    )

    # ============================================================================
    # LOCK SETTINGS
    # ============================================================================
    lock_expiration_seconds: float = Field(
        default=15.0, description="Age after which a lock sentinel is reclaimed"
    )
    lock_poll_interval_seconds: float = Field(
        default=1.0, description="Delay between lock acquisition attempts"
    )
    lock_timeout_seconds: float = Field(
        default=15.0, description="Overall lock acquisition deadline"
    )
    lock_skip_when_cached: bool = Field(
        default=False,
        description="Treat keys with a cached payload as unlocked (skips remote lock)",
    )

    # ============================================================================
    # HELPER METHODS
    # ============================================================================

    def get_encryption_key(self) -> bytes | None:
        """
        Get the encryption key as bytes.

        Returns:
            bytes | None: Key bytes, or None when encryption is disabled.
        """
        if not self.encryption_key:
            return None
        return self.encryption_key.encode("utf-8")


# ============================================================================
# SINGLETON PATTERN - Global settings instance
# ============================================================================


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings (LRU cached).

    This function is cached, so the .env file is only read once.
    To refresh the configuration, clear the cache:
        get_settings.cache_clear()

    Returns:
        Settings: Application configuration instance.
    """
    return Settings()
