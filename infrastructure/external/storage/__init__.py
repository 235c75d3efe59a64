"""Storage provider package: configuration, factory, models and exceptions."""
from typing import Optional

from core.config import Settings, settings
from .base import StorageProvider
from .config import StorageConfig, StorageType
from .factory import create_provider, register_provider


def get_storage_config(app_settings: Optional[Settings] = None) -> StorageConfig:
    """Assemble StorageConfig from core.config settings (single source of truth).

    Returns:
        Storage configuration instance
    """
    s = (app_settings or settings).storage
    return StorageConfig(
        type=s.type or StorageType.S3,
        bucket=s.bucket,
        region=s.region,
        endpoint=s.endpoint,
        aws_access_key_id=s.aws_access_key_id,
        aws_secret_access_key=s.aws_secret_access_key,
        acl=s.acl,
        local_base_path=s.local_base_path,
        max_retry_attempts=s.max_retry_attempts,
        timeout=s.timeout,
        enable_ssl=s.enable_ssl,
    )


__all__ = [
    # Factory
    "get_storage_config",
    "create_provider",
    "register_provider",

    # Configuration
    "StorageConfig",
    "StorageType",

    # Base types
    "StorageProvider",
    "UploadResult",

    # Exceptions
    "StorageError",
    "NotFoundError",
    "PermissionDeniedError",
    "TransientError",
    "ConfigurationError",
    "ValidationError",

    # Utils
    "guess_content_type",
    "with_retry",
]

from .models import UploadResult
from .exceptions import (
    StorageError,
    NotFoundError,
    PermissionDeniedError,
    TransientError,
    ConfigurationError,
    ValidationError
)
from .utils import (
    guess_content_type,
    with_retry,
)
