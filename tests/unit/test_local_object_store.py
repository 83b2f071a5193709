"""Tests for the local file-based object store."""

import pytest

from certvault.infrastructure.implementations.local import LocalObjectStore
from certvault.models.errors import ObjectNotFoundError, StoreUnavailableError


@pytest.mark.asyncio
async def test_put_and_get(object_store):
    """Test a written object can be read back."""
    await object_store.put_object("p/cert/a.crt", b"content")

    stream = await object_store.get_object("p/cert/a.crt")

    assert stream.read() == b"content"
    assert (object_store.bucket_dir / "p" / "cert" / "a.crt").exists()


@pytest.mark.asyncio
async def test_get_missing(object_store):
    """Test reading a missing object raises ObjectNotFoundError."""
    with pytest.raises(ObjectNotFoundError) as exc_info:
        await object_store.get_object("p/missing")

    assert exc_info.value.name == "p/missing"


@pytest.mark.asyncio
async def test_put_overwrites(object_store):
    """Test writing twice keeps the last body."""
    await object_store.put_object("k", b"one")
    await object_store.put_object("k", b"two")

    assert (await object_store.get_object("k")).read() == b"two"


@pytest.mark.asyncio
async def test_remove(object_store):
    """Test removing an object and removing a missing one."""
    await object_store.put_object("k", b"v")

    await object_store.remove_object("k")
    await object_store.remove_object("k")

    with pytest.raises(ObjectNotFoundError):
        await object_store.get_object("k")


@pytest.mark.asyncio
async def test_stat(object_store):
    """Test stat returns size and an aware modification time."""
    await object_store.put_object("p/k", b"12345")

    info = await object_store.stat_object("p/k")

    assert info.name == "p/k"
    assert info.size == 5
    assert info.last_modified.tzinfo is not None


@pytest.mark.asyncio
async def test_stat_missing(object_store):
    """Test stat of a missing object raises ObjectNotFoundError."""
    with pytest.raises(ObjectNotFoundError):
        await object_store.stat_object("nope")


@pytest.mark.asyncio
async def test_names_cannot_escape_bucket(object_store):
    """Test names with parent references are rejected."""
    with pytest.raises(ValueError):
        await object_store.put_object("../outside", b"x")


@pytest.mark.asyncio
async def test_bucket_exists(temp_dir):
    """Test bucket existence follows the bucket directory."""
    created = LocalObjectStore("present", base_dir=str(temp_dir))
    missing = LocalObjectStore(
        "absent", base_dir=str(temp_dir), auto_create_bucket=False
    )

    assert await created.bucket_exists() is True
    assert await missing.bucket_exists() is False


@pytest.mark.asyncio
async def test_list_includes_dot_named_objects(object_store):
    """Test keys whose last segment starts with a dot are listed."""
    await object_store.put_object("p/.well-known", b"x")
    await object_store.put_object("p/a.crt", b"y")

    names = await object_store.list_objects("p/", recursive=True)

    assert names == ["p/.well-known", "p/a.crt"]


@pytest.mark.asyncio
async def test_list_skips_partial_writes(object_store):
    """Test temporary files from in-flight writes are not listed."""
    await object_store.put_object("p/a.crt", b"y")
    (object_store.bucket_dir / "p" / ".b.crt.certvault-tmp").write_bytes(b"partial")

    assert await object_store.list_objects("p/", recursive=True) == ["p/a.crt"]


@pytest.mark.asyncio
async def test_read_failure_raises_store_unavailable(object_store, mocker):
    """Test filesystem errors surface as StoreUnavailableError."""
    await object_store.put_object("p/k", b"v")
    mocker.patch("pathlib.Path.read_bytes", side_effect=PermissionError("denied"))

    with pytest.raises(StoreUnavailableError) as exc_info:
        await object_store.get_object("p/k")

    assert exc_info.value.name == "p/k"
