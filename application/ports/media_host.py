"""What the media sync use cases need from the host CMS."""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class MediaHost(Protocol):
    def upload_base_url(self) -> str:
        """Public base URL of the upload root, without trailing slash."""
        ...

    def upload_base_dir(self) -> str:
        """Local directory of the upload root."""
        ...

    def attachment_url(self, record_id: int) -> Optional[str]:
        """Public URL of an attachment record, None when unknown."""
        ...
