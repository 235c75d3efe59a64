"""Pytest bootstrap configuration.

Environment is set before application modules build their settings.
"""
import os

os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from typing import Optional

import pytest

from core.config import MediaSettings, Settings, StorageSettings
from infrastructure.external.storage import StorageError, UploadResult

from tests.consts import BASE_URL, BUCKET, CDN_BASE_URL


class RecordingProvider:
    """Provider double that records calls and can be told to fail."""

    def __init__(self, bucket: str = BUCKET, fail_with: Optional[Exception] = None, url: bool = True):
        self.bucket = bucket
        self.fail_with = fail_with
        self.return_url = url
        self.puts: list[tuple[str, str]] = []
        self.deletes: list[str] = []
        self.objects: set[str] = set()

    async def upload_file(self, path, key, content_type=None):
        self.puts.append((path, key))
        if self.fail_with is not None:
            raise self.fail_with
        self.objects.add(key)
        return UploadResult(
            key=key,
            size=0,
            url=f"https://{self.bucket}.s3.us-east-1.amazonaws.com/{key}" if self.return_url else None,
        )

    async def delete(self, key):
        self.deletes.append(key)
        if self.fail_with is not None:
            raise self.fail_with
        self.objects.discard(key)
        return True

    async def exists(self, key):
        return key in self.objects

    def object_url(self, key):
        return f"https://{self.bucket}.s3.us-east-1.amazonaws.com/{key}"

    def public_url(self, key):
        return None

    async def health_check(self):
        return self.fail_with is None


@pytest.fixture
def upload_dir(tmp_path):
    d = tmp_path / "uploads"
    d.mkdir()
    return d


@pytest.fixture
def media_settings(upload_dir):
    return MediaSettings(
        upload_base_url=BASE_URL,
        upload_base_dir=str(upload_dir),
        cdn_base_url=CDN_BASE_URL,
    )


@pytest.fixture
def app_settings(media_settings, tmp_path):
    return Settings(
        storage=StorageSettings(
            type="local",
            bucket=BUCKET,
            local_base_path=str(tmp_path / "bucket"),
        ),
        media=media_settings,
    )


@pytest.fixture
def provider():
    return RecordingProvider()


@pytest.fixture
def failing_provider():
    return RecordingProvider(fail_with=StorageError("boom"))


@pytest.fixture
def make_provider():
    return RecordingProvider
