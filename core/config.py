"""
Project configuration (pydantic-settings, nested groups with `__` delimiter).
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class StorageSettings(BaseModel):
    type: str = "s3"  # s3, local
    bucket: Optional[str] = None
    region: str = "us-east-1"
    endpoint: Optional[str] = None
    # S3 specific
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    acl: Optional[str] = "private"
    # Local storage specific
    local_base_path: str = "/tmp/storage"
    # Advanced settings
    max_retry_attempts: int = 3
    timeout: int = 30
    enable_ssl: bool = True


class MediaSettings(BaseModel):
    """Host upload root and offload behaviour."""
    upload_base_url: Optional[str] = None  # e.g. http://site/wp-content/uploads
    upload_base_dir: Optional[str] = None  # e.g. /var/www/html/wp-content/uploads
    cdn_base_url: Optional[str] = None  # image handler distribution
    key_prefix: str = "uploads"
    url_mode: str = "cdn"  # cdn | s3
    delete_local_after_upload: bool = True
    rewrite_urls: bool = True
    suppress_size_variants: bool = True
    raise_on_storage_error: bool = False
    retry_attempts: int = 1

    @field_validator("upload_base_url", "cdn_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip("/") if v else v

    @field_validator("key_prefix")
    @classmethod
    def _strip_prefix_slashes(cls, v: str) -> str:
        return v.strip("/")

    @field_validator("url_mode")
    @classmethod
    def _check_url_mode(cls, v: str) -> str:
        mode = v.lower()
        if mode not in {"cdn", "s3"}:
            raise ValueError(f"url_mode must be 'cdn' or 's3', got {v!r}")
        return mode

    @field_validator("retry_attempts")
    @classmethod
    def _check_retry_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("retry_attempts must be >= 1")
        return v


class Settings(BaseSettings):
    """Project settings."""

    PROJECT_NAME: str = Field(default="Media S3 Sync")
    VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)

    storage: StorageSettings = Field(default_factory=StorageSettings)
    media: MediaSettings = Field(default_factory=MediaSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )


settings = Settings()
