"""Wires the media sync service to its storage provider, host and hook registry."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from application.services.media_sync_service import MediaSyncService
from core.config import Settings, settings as default_settings
from core.logging_config import get_logger
from infrastructure.adapters.storage_port import StorageProviderPortAdapter
from infrastructure.external.storage import (
    StorageProvider,
    create_provider,
    get_storage_config,
)
from infrastructure.hooks.inmemory import InMemoryHookRegistry
from infrastructure.host.static_host import StaticMediaHost

logger = get_logger(__name__)


@dataclass
class MediaSyncRuntime:
    service: MediaSyncService
    hooks: InMemoryHookRegistry
    host: StaticMediaHost
    storage: StorageProviderPortAdapter


async def bootstrap_media_sync(
    app_settings: Optional[Settings] = None,
    provider: Optional[StorageProvider] = None,
) -> MediaSyncRuntime:
    """Build the service and register its hooks.

    Fails fast: missing credentials, bucket or upload root raise a
    configuration error instead of leaving the hooks unregistered.
    """
    app_settings = app_settings or default_settings
    host = StaticMediaHost.from_settings(app_settings.media)
    config = get_storage_config(app_settings)
    if provider is None:
        provider = await create_provider(config)

    storage = StorageProviderPortAdapter(provider, retry_attempts=app_settings.media.retry_attempts)
    bucket = getattr(provider, "bucket", None) or config.bucket
    service = MediaSyncService(storage, host, app_settings.media, bucket)

    hooks = InMemoryHookRegistry()
    service.register(hooks)
    logger.info(
        "media_sync_ready",
        provider=config.type,
        bucket=bucket,
        upload_base_url=host.upload_base_url(),
    )
    return MediaSyncRuntime(service=service, hooks=hooks, host=host, storage=storage)
