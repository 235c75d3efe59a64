import pytest

from application.ports.hooks import (
    HOOK_ATTACHMENT_URL,
    HOOK_DELETE_ATTACHMENT,
    HOOK_HANDLE_UPLOAD,
    HOOK_IMAGE_SIZES,
)
from core.config import Settings, StorageSettings
from domain.common.exceptions import MediaSyncConfigurationError
from infrastructure.external.storage import ConfigurationError
from infrastructure.external.storage.providers.local import LocalProvider
from infrastructure.media_sync import bootstrap_media_sync
from tests.consts import BUCKET


@pytest.mark.asyncio
async def test_local_bootstrap_registers_every_hook(app_settings):
    runtime = await bootstrap_media_sync(app_settings)

    assert isinstance(runtime.storage.provider, LocalProvider)
    for hook in (HOOK_HANDLE_UPLOAD, HOOK_DELETE_ATTACHMENT, HOOK_IMAGE_SIZES, HOOK_ATTACHMENT_URL):
        assert runtime.hooks.has_hook(hook)
    assert runtime.service.bucket == BUCKET


@pytest.mark.asyncio
async def test_injected_provider_is_used(app_settings, provider):
    runtime = await bootstrap_media_sync(app_settings, provider=provider)

    assert runtime.storage.provider is provider


@pytest.mark.asyncio
async def test_missing_upload_root_fails_fast(app_settings, provider):
    broken = app_settings.model_copy(
        update={"media": app_settings.media.model_copy(update={"upload_base_url": None})}
    )

    with pytest.raises(MediaSyncConfigurationError) as exc_info:
        await bootstrap_media_sync(broken, provider=provider)
    assert exc_info.value.field == "upload_base_url"


@pytest.mark.asyncio
async def test_s3_without_credentials_fails_fast(media_settings):
    app_settings = Settings(
        storage=StorageSettings(type="s3", bucket=BUCKET, aws_access_key_id=None, aws_secret_access_key=None),
        media=media_settings,
    )

    with pytest.raises(ConfigurationError):
        await bootstrap_media_sync(app_settings)
