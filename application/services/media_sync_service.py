"""Media library offload: host lifecycle events to bucket operations and URL rewrites."""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from application.ports.hooks import (
    HookRegistryPort,
    HOOK_ATTACHMENT_URL,
    HOOK_DELETE_ATTACHMENT,
    HOOK_HANDLE_UPLOAD,
    HOOK_IMAGE_SIZES,
)
from application.ports.media_host import MediaHost
from application.ports.storage import RemoteResult, StoragePort
from application.utils.storage import (
    build_cdn_url,
    build_s3_url,
    object_key,
    relative_upload_path,
    resolve_local_path,
    upload_source_path,
)
from core.config import MediaSettings
from core.logging_config import get_logger
from domain.common.exceptions import (
    AttachmentNotFoundError,
    InvalidLocalPathError,
    MediaSyncConfigurationError,
    RemoteOperationError,
    UploadPathMismatchError,
)

logger = get_logger(__name__)

UPLOAD_ERROR_MESSAGE = "There was an error uploading the file."
DELETE_ERROR_MESSAGE = "There was an error deleting the file."


class MediaSyncService:
    """Reacts to the four media lifecycle hooks of the host.

    - upload: push the file to the bucket, optionally delete the local copy
    - delete: remove the remote object of a deleted attachment
    - size variants: suppress resized copies
    - attachment URL: point at the CDN image handler (or the bucket)

    Holds no state besides its settings; every handler is single-shot.
    """

    def __init__(
        self,
        storage: StoragePort,
        host: MediaHost,
        media: MediaSettings,
        bucket: str,
    ):
        if media.rewrite_urls and media.url_mode == "cdn" and not media.cdn_base_url:
            raise MediaSyncConfigurationError(
                "MEDIA__CDN_BASE_URL is required when URL rewriting uses the CDN",
                field="cdn_base_url",
            )
        if not bucket:
            raise MediaSyncConfigurationError("Bucket name is required", field="bucket")
        self._storage = storage
        self._host = host
        self._media = media
        self._bucket = bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    # ------------------------------------------------------------------
    # Hook wiring
    # ------------------------------------------------------------------
    def register(self, hooks: HookRegistryPort) -> None:
        hooks.add_filter(HOOK_HANDLE_UPLOAD, self.handle_upload, 10, 1)
        hooks.add_action(HOOK_DELETE_ATTACHMENT, self.handle_delete, 10, 1)
        if self._media.suppress_size_variants:
            hooks.add_filter(HOOK_IMAGE_SIZES, self.suppress_size_variants, 10, 1)
        if self._media.rewrite_urls:
            hooks.add_filter(HOOK_ATTACHMENT_URL, self.rewrite_url, 10, 2)
        logger.info(
            "media_sync_hooks_registered",
            bucket=self._bucket,
            rewrite_urls=self._media.rewrite_urls,
            suppress_size_variants=self._media.suppress_size_variants,
        )

    # ------------------------------------------------------------------
    # Host event handlers
    # ------------------------------------------------------------------
    async def handle_upload(self, metadata: Mapping[str, Any]) -> Mapping[str, Any]:
        """Upload filter. Always returns ``metadata`` itself, unmodified.

        The file that was put is the one removed afterwards; relative paths
        are resolved against the upload base directory once, up front.
        """
        local_path = metadata.get("file")
        url = metadata.get("url") or ""
        relative = relative_upload_path(url, self._host.upload_base_url())
        if not local_path or relative is None:
            logger.warning(
                "upload_outside_upload_root",
                url=url,
                base_url=self._host.upload_base_url(),
            )
            return metadata

        try:
            source = upload_source_path(self._host.upload_base_dir(), local_path)
        except InvalidLocalPathError as e:
            logger.warning("upload_source_rejected", path=local_path, error=e.message)
            return metadata

        result = await self.remote_put(str(source), relative)

        if self._media.delete_local_after_upload and result.ok and result.url:
            self._unlink(source)
        return metadata

    async def handle_delete(self, record_id: int) -> None:
        """Attachment deletion action.

        Raises:
            AttachmentNotFoundError: the host has no URL for ``record_id``
            UploadPathMismatchError: the URL is not under the upload root
        """
        url = self._host.attachment_url(record_id)
        if not url:
            raise AttachmentNotFoundError(record_id)
        base_url = self._host.upload_base_url()
        relative = relative_upload_path(url, base_url)
        if relative is None:
            raise UploadPathMismatchError(url, base_url)
        await self.remote_delete(relative)

    def suppress_size_variants(self, requested_sizes: Any) -> Any:
        if not self._media.suppress_size_variants:
            return requested_sizes
        if isinstance(requested_sizes, Mapping):
            return {}
        return []

    def rewrite_url(self, original_url: str, record_id: Optional[int] = None) -> str:
        """Attachment URL filter; URLs outside the upload root pass through."""
        if not self._media.rewrite_urls:
            return original_url
        relative = relative_upload_path(original_url, self._host.upload_base_url())
        if relative is None:
            return original_url
        if self._media.url_mode == "s3":
            return self.s3_url(relative)
        return self.cdn_url(relative)

    # ------------------------------------------------------------------
    # Remote and local operations
    # ------------------------------------------------------------------
    def object_key(self, relative_path: str) -> str:
        return object_key(self._media.key_prefix, relative_path)

    def cdn_url(self, relative_path: str) -> str:
        return build_cdn_url(self._media.cdn_base_url, self._bucket, self.object_key(relative_path))

    def s3_url(self, relative_path: str) -> str:
        return build_s3_url(self._bucket, self.object_key(relative_path))

    async def remote_put(self, local_path: str, key: str) -> RemoteResult:
        """Put ``local_path`` at ``<prefix>/<key>``."""
        full_key = self.object_key(key)
        result = await self._storage.put_file(local_path, full_key)
        if not result.ok:
            logger.error(
                UPLOAD_ERROR_MESSAGE,
                bucket=self._bucket,
                key=full_key,
                error=result.error,
                error_type=result.error_type,
            )
            if self._media.raise_on_storage_error:
                raise RemoteOperationError("put", full_key, result.error)
        return result

    async def remote_delete(self, key: str) -> RemoteResult:
        """Delete ``<prefix>/<key>``. Deleting a missing key succeeds."""
        full_key = self.object_key(key)
        result = await self._storage.delete(full_key)
        if not result.ok:
            logger.error(
                DELETE_ERROR_MESSAGE,
                bucket=self._bucket,
                key=full_key,
                error=result.error,
                error_type=result.error_type,
            )
            if self._media.raise_on_storage_error:
                raise RemoteOperationError("delete", full_key, result.error)
        return result

    def delete_local(self, path: str) -> bool:
        """Remove a file below the upload base directory; True if one was removed.

        Raises:
            InvalidLocalPathError: ``path`` escapes the upload base directory
        """
        return self._unlink(resolve_local_path(self._host.upload_base_dir(), path))

    def _unlink(self, full_path: Path) -> bool:
        if not full_path.is_file():
            return False
        full_path.unlink()
        logger.info("local_file_deleted", path=str(full_path))
        return True
