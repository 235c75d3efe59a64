import pytest
import pytest_asyncio

from infrastructure.external.storage import (
    NotFoundError,
    StorageConfig,
    StorageType,
    ValidationError,
    create_provider,
)


@pytest_asyncio.fixture
async def local_provider(tmp_path):
    return await create_provider(
        StorageConfig(type=StorageType.LOCAL, bucket="dev", local_base_path=str(tmp_path / "bucket"))
    )


@pytest.mark.asyncio
async def test_upload_copies_file(local_provider, tmp_path):
    src = tmp_path / "a.txt"
    src.write_bytes(b"hello")

    result = await local_provider.upload_file(str(src), "uploads/a.txt")

    assert result.size == 5
    assert result.content_type == "text/plain"
    assert result.url.startswith("file://")
    assert (tmp_path / "bucket" / "uploads" / "a.txt").read_bytes() == b"hello"
    assert await local_provider.exists("uploads/a.txt")


@pytest.mark.asyncio
async def test_delete_reports_whether_file_existed(local_provider, tmp_path):
    src = tmp_path / "a.txt"
    src.write_bytes(b"hello")
    await local_provider.upload_file(str(src), "uploads/a.txt")

    assert await local_provider.delete("uploads/a.txt") is True
    assert await local_provider.delete("uploads/a.txt") is False


@pytest.mark.asyncio
async def test_missing_source_file(local_provider, tmp_path):
    with pytest.raises(NotFoundError):
        await local_provider.upload_file(str(tmp_path / "nope"), "uploads/nope")


@pytest.mark.asyncio
async def test_traversal_keys_rejected(local_provider, tmp_path):
    src = tmp_path / "a.txt"
    src.write_bytes(b"hello")
    with pytest.raises(ValidationError):
        await local_provider.upload_file(str(src), "../../etc/a.txt")
    assert not await local_provider.exists("../../etc/a.txt")
