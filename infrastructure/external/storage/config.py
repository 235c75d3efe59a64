"""Storage configuration models."""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class StorageType(str, Enum):
    """Storage provider types."""
    S3 = "s3"
    LOCAL = "local"


class StorageConfig(BaseModel):
    """Storage configuration model."""
    model_config = ConfigDict(use_enum_values=True)

    # Common settings
    type: StorageType = StorageType.S3
    bucket: Optional[str] = None
    region: str = "us-east-1"
    endpoint: Optional[str] = None

    # S3 specific
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    acl: Optional[str] = "private"  # Access control list

    # Local specific
    local_base_path: str = "/tmp/storage"

    # Advanced settings
    max_retry_attempts: int = 3
    timeout: int = 30
    enable_ssl: bool = True
