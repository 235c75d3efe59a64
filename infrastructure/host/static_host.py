"""Settings-backed MediaHost with an in-memory attachment index."""
from __future__ import annotations

from typing import Optional

from application.ports.media_host import MediaHost
from core.config import MediaSettings
from domain.common.exceptions import MediaSyncConfigurationError


class StaticMediaHost(MediaHost):
    def __init__(self, base_url: str, base_dir: str) -> None:
        self._base_url = base_url.rstrip("/")
        self._base_dir = base_dir
        self._attachments: dict[int, str] = {}

    @classmethod
    def from_settings(cls, media: MediaSettings) -> "StaticMediaHost":
        if not media.upload_base_url:
            raise MediaSyncConfigurationError(
                "MEDIA__UPLOAD_BASE_URL is required", field="upload_base_url"
            )
        if not media.upload_base_dir:
            raise MediaSyncConfigurationError(
                "MEDIA__UPLOAD_BASE_DIR is required", field="upload_base_dir"
            )
        return cls(media.upload_base_url, media.upload_base_dir)

    def upload_base_url(self) -> str:
        return self._base_url

    def upload_base_dir(self) -> str:
        return self._base_dir

    def attachment_url(self, record_id: int) -> Optional[str]:
        return self._attachments.get(record_id)

    def register_attachment(self, record_id: int, url: str) -> None:
        self._attachments[record_id] = url

    def forget_attachment(self, record_id: int) -> Optional[str]:
        return self._attachments.pop(record_id, None)
