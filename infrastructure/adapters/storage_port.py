"""Infrastructure adapter that implements the application StoragePort
by delegating to the concrete StorageProvider and translating its
exceptions into RemoteResult values.
"""
from __future__ import annotations

from typing import Optional

from application.ports.storage import RemoteResult, StorageInfo, StoragePort
from core.logging_config import get_logger
from infrastructure.external.storage import (
    StorageError,
    StorageProvider,
    TransientError,
    with_retry,
)

logger = get_logger(__name__)


class StorageProviderPortAdapter(StoragePort):
    def __init__(self, provider: Optional[StorageProvider], retry_attempts: int = 1):
        self.provider = provider
        self.retry_attempts = retry_attempts

    def info(self) -> StorageInfo:
        cfg = getattr(self.provider, "config", None)
        stype = getattr(cfg, "type", None)
        bucket = getattr(cfg, "bucket", None)
        region = getattr(cfg, "region", None)
        return StorageInfo(type=str(stype) if stype is not None else "", bucket=bucket, region=region)

    async def put_file(
        self,
        path: str,
        key: str,
        content_type: Optional[str] = None,
    ) -> RemoteResult:
        if self.provider is None:
            logger.debug("storage_put_skipped", key=key, reason="no storage client")
            return RemoteResult.skip("put", key)

        @with_retry(max_attempts=self.retry_attempts, wait_multiplier=0.2, wait_max=2)
        async def _put():
            return await self.provider.upload_file(path, key, content_type=content_type)

        try:
            result = await _put()
        except StorageError as e:
            return RemoteResult.failure("put", key, e, transient=isinstance(e, TransientError))
        return RemoteResult.success("put", key, url=result.url)

    async def delete(self, key: str) -> RemoteResult:
        if self.provider is None:
            logger.debug("storage_delete_skipped", key=key, reason="no storage client")
            return RemoteResult.skip("delete", key)

        @with_retry(max_attempts=self.retry_attempts, wait_multiplier=0.2, wait_max=2)
        async def _delete():
            return await self.provider.delete(key)

        try:
            await _delete()
        except StorageError as e:
            return RemoteResult.failure("delete", key, e, transient=isinstance(e, TransientError))
        return RemoteResult.success("delete", key)

    async def health_check(self) -> bool:
        if self.provider is None:
            return False
        return await self.provider.health_check()
