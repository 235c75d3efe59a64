"""Storage provider protocol definitions."""
from typing import Protocol, Optional, runtime_checkable

from .models import UploadResult


@runtime_checkable
class StorageProvider(Protocol):
    """Core storage provider protocol for duck typing."""

    async def upload_file(
        self,
        path: str,
        key: str,
        content_type: Optional[str] = None
    ) -> UploadResult:
        """Upload a local file to storage, streaming it from disk."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete object from storage. Missing objects are not an error."""
        ...

    async def exists(self, key: str) -> bool:
        """Check if object exists in storage."""
        ...

    def object_url(self, key: str) -> str:
        """Canonical URL of the stored object."""
        ...

    def public_url(self, key: str) -> Optional[str]:
        """Publicly reachable URL, when the object is public."""
        ...

    async def health_check(self) -> bool:
        """Check storage connectivity and permissions."""
        ...
