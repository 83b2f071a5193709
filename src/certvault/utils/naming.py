"""Object naming for logical keys."""

LOCK_SUFFIX = ".lock"
KEY_INFO_SUFFIX = "_ki"


def object_name(prefix: str, key: str) -> str:
    """Map a logical key to its object name: "{prefix}/{key}"."""
    return f"{prefix}/{key}"


def lock_object_name(prefix: str, key: str) -> str:
    """Map a logical key to its lock sentinel: "{prefix}/{key}.lock"."""
    return object_name(prefix, key) + LOCK_SUFFIX


def key_info_cache_key(key: str) -> str:
    """Cache key under which the KeyInfo of key is stored."""
    return key + KEY_INFO_SUFFIX
