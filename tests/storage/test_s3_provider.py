import boto3
import pytest
from moto import mock_aws

from infrastructure.external.storage import (
    ConfigurationError,
    NotFoundError,
    StorageConfig,
    StorageType,
    create_provider,
)
from tests.consts import BUCKET


def _config(**overrides) -> StorageConfig:
    values = dict(
        type=StorageType.S3,
        bucket=BUCKET,
        region="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        max_retry_attempts=1,
    )
    values.update(overrides)
    return StorageConfig(**values)


@pytest.fixture
def mocked_s3():
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.mark.asyncio
async def test_upload_file_streams_local_file(mocked_s3, tmp_path):
    local = tmp_path / "x.png"
    local.write_bytes(b"\x89PNG data")
    provider = await create_provider(_config())

    result = await provider.upload_file(str(local), "uploads/2024/x.png")

    assert result.key == "uploads/2024/x.png"
    assert result.size == len(b"\x89PNG data")
    assert result.content_type == "image/png"
    assert result.url == f"https://{BUCKET}.s3.us-east-1.amazonaws.com/uploads/2024/x.png"
    obj = mocked_s3.get_object(Bucket=BUCKET, Key="uploads/2024/x.png")
    assert obj["Body"].read() == b"\x89PNG data"
    assert obj["ContentType"] == "image/png"


@pytest.mark.asyncio
async def test_uploaded_object_is_private(mocked_s3, tmp_path):
    local = tmp_path / "x.png"
    local.write_bytes(b"data")
    provider = await create_provider(_config())

    await provider.upload_file(str(local), "uploads/x.png")

    acl = mocked_s3.get_object_acl(Bucket=BUCKET, Key="uploads/x.png")
    grants = {g["Permission"] for g in acl["Grants"] if g["Grantee"].get("URI")}
    assert grants == set()
    assert provider.public_url("uploads/x.png") is None


@pytest.mark.asyncio
async def test_upload_missing_local_file(mocked_s3, tmp_path):
    provider = await create_provider(_config())

    with pytest.raises(NotFoundError):
        await provider.upload_file(str(tmp_path / "missing.png"), "uploads/missing.png")


@pytest.mark.asyncio
async def test_delete_is_idempotent(mocked_s3, tmp_path):
    local = tmp_path / "x.png"
    local.write_bytes(b"data")
    provider = await create_provider(_config())
    await provider.upload_file(str(local), "uploads/x.png")

    assert await provider.exists("uploads/x.png")
    assert await provider.delete("uploads/x.png") is True
    assert await provider.delete("uploads/x.png") is True
    assert not await provider.exists("uploads/x.png")


@pytest.mark.asyncio
async def test_missing_credentials_fail_fast(mocked_s3):
    with pytest.raises(ConfigurationError):
        await create_provider(_config(aws_access_key_id=None))


@pytest.mark.asyncio
async def test_missing_bucket_fails_health_check(mocked_s3):
    with pytest.raises(ConfigurationError):
        await create_provider(_config(bucket="does-not-exist"))
