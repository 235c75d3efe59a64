"""Local file system storage provider implementation.

Stands in for the bucket during development: objects are plain files under
``local_base_path``, keyed by their path relative to it.
"""
import hashlib
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from core.logging_config import get_logger
from ..base import StorageProvider
from ..config import StorageConfig
from ..models import UploadResult
from ..exceptions import (
    StorageError,
    NotFoundError,
    ValidationError
)
from ..utils import guess_content_type

logger = get_logger(__name__)

_CHUNK_SIZE = 64 * 1024


class LocalProvider(StorageProvider):
    """Local file system storage provider."""

    def __init__(self, config: StorageConfig):
        """Initialize local storage provider.

        Args:
            config: Storage configuration
        """
        self.config = config
        self.bucket = config.bucket or "local"
        self.base_path = Path(config.local_base_path).resolve()

        self.base_path.mkdir(parents=True, exist_ok=True)

    async def upload_file(
        self,
        path: str,
        key: str,
        content_type: Optional[str] = None
    ) -> UploadResult:
        """Copy a local file into the storage directory."""
        dest = self._safe_path(key)
        md5 = hashlib.md5()
        size = 0
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "rb") as src, aiofiles.open(dest, "wb") as out:
                while True:
                    chunk = await src.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    md5.update(chunk)
                    size += len(chunk)
                    await out.write(chunk)
        except FileNotFoundError as e:
            raise NotFoundError(f"Local file not found: {path}") from e
        except OSError as e:
            raise StorageError(f"Failed to upload {key}: {e}") from e

        logger.info("local_object_uploaded", key=key, size=size)
        return UploadResult(
            key=key,
            etag=md5.hexdigest(),
            size=size,
            content_type=content_type or guess_content_type(path),
            url=self.object_url(key),
        )

    async def delete(self, key: str) -> bool:
        """Delete file from local storage."""
        file_path = self._safe_path(key)
        try:
            if file_path.exists():
                await aiofiles.os.remove(file_path)
                logger.info("local_object_deleted", key=key)
                return True
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e

    async def exists(self, key: str) -> bool:
        """Check if file exists in local storage."""
        try:
            file_path = self._safe_path(key)
        except ValidationError:
            return False
        return file_path.is_file()

    def object_url(self, key: str) -> str:
        return self._safe_path(key).as_uri()

    def public_url(self, key: str) -> Optional[str]:
        return None

    async def health_check(self) -> bool:
        """Check local storage accessibility."""
        try:
            test_file = self.base_path / ".health_check"
            test_file.touch()
            test_file.unlink()
            return True
        except OSError as e:
            logger.error("local_health_check_failed", path=str(self.base_path), error=str(e))
            return False

    def _safe_path(self, key: str) -> Path:
        """Build safe path preventing directory traversal.

        Raises:
            ValidationError: If path is unsafe
        """
        clean_key = key.lstrip("/")
        path = (self.base_path / clean_key).resolve()
        try:
            path.relative_to(self.base_path)
        except ValueError:
            raise ValidationError(f"Invalid path: {key}")
        return path


async def build_local_provider(config: StorageConfig) -> LocalProvider:
    """Build local storage provider.

    Args:
        config: Storage configuration

    Returns:
        Configured local provider instance
    """
    provider = LocalProvider(config)

    if not await provider.health_check():
        raise StorageError("Failed to access local storage")

    return provider
