"""AWS S3 storage provider implementation."""
import os
from typing import Optional, Any
from functools import partial
from urllib.parse import quote

import anyio
from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from core.logging_config import get_logger
from ..base import StorageProvider
from ..config import StorageConfig
from ..models import UploadResult
from ..exceptions import (
    StorageError,
    NotFoundError,
    PermissionDeniedError,
    TransientError,
    ConfigurationError,
)
from ..utils import guess_content_type

logger = get_logger(__name__)


class S3Provider(StorageProvider):
    """AWS S3 storage provider."""

    def __init__(
        self,
        client: Any,  # boto3 S3 client
        config: StorageConfig
    ):
        """Initialize S3 provider.

        Args:
            client: Boto3 S3 client instance
            config: Storage configuration
        """
        self.client = client
        self.config = config
        self.bucket = config.bucket
        self.region = config.region or "us-east-1"

    def _put_file(self, path: str, key: str, extra_args: dict) -> dict:
        with open(path, "rb") as body:
            return self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                **extra_args
            )

    async def upload_file(
        self,
        path: str,
        key: str,
        content_type: Optional[str] = None
    ) -> UploadResult:
        """Upload a local file to S3."""
        try:
            size = os.path.getsize(path)
            content_type = content_type or guess_content_type(path)
            extra_args = {"ContentType": content_type}
            if self.config.acl:
                extra_args["ACL"] = self.config.acl

            # Sync SDK call in a worker thread
            response = await anyio.to_thread.run_sync(
                partial(self._put_file, path, key, extra_args)
            )
        except FileNotFoundError as e:
            raise NotFoundError(f"Local file not found: {path}") from e
        except Exception as e:
            self._handle_exception(e, f"upload {key}")

        etag = (response or {}).get("ETag", "").strip('"') or None
        result = UploadResult(
            key=key,
            etag=etag,
            size=size,
            content_type=content_type,
            url=self.object_url(key),
        )
        logger.info("s3_object_uploaded", bucket=self.bucket, key=key, size=size)
        return result

    async def delete(self, key: str) -> bool:
        """Delete object from S3. S3 answers 204 for missing keys as well."""
        try:
            await anyio.to_thread.run_sync(
                partial(
                    self.client.delete_object,
                    Bucket=self.bucket,
                    Key=key
                )
            )
        except Exception as e:
            self._handle_exception(e, f"delete {key}")
        logger.info("s3_object_deleted", bucket=self.bucket, key=key)
        return True

    async def exists(self, key: str) -> bool:
        """Check if object exists in S3."""
        try:
            await anyio.to_thread.run_sync(
                partial(
                    self.client.head_object,
                    Bucket=self.bucket,
                    Key=key
                )
            )
            return True
        except Exception as e:
            code = _error_code(e)
            if code in ("404", "NoSuchKey", "NotFound"):
                return False
            self._handle_exception(e, f"exists {key}")

    def object_url(self, key: str) -> str:
        quoted = quote(key, safe="/")
        if self.config.endpoint:
            return f"{self.config.endpoint.rstrip('/')}/{self.bucket}/{quoted}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quoted}"

    def public_url(self, key: str) -> Optional[str]:
        """Static URL for public-read buckets; private objects have none."""
        if self.config.acl == "public-read":
            return self.object_url(key)
        return None

    async def health_check(self) -> bool:
        """Check S3 connectivity."""
        try:
            await anyio.to_thread.run_sync(
                partial(
                    self.client.head_bucket,
                    Bucket=self.bucket
                )
            )
            logger.info("s3_health_check_passed", bucket=self.bucket)
            return True
        except Exception as e:
            logger.error("s3_health_check_failed", bucket=self.bucket, error=str(e))
            return False

    def _handle_exception(self, e: Exception, operation: str) -> None:
        """Map S3 exceptions to storage exceptions."""
        if isinstance(e, StorageError):
            raise e
        if isinstance(e, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
            raise TransientError(f"Transient error: {operation}: {e}") from e

        error_code = _error_code(e)
        if error_code in ["NoSuchKey", "NoSuchBucket", "404"]:
            raise NotFoundError(f"Object not found: {operation}") from e
        elif error_code in ["AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch", "403"]:
            raise PermissionDeniedError(f"Access denied: {operation}") from e
        elif error_code in ["RequestTimeout", "SlowDown", "ServiceUnavailable", "InternalError", "503", "500"]:
            raise TransientError(f"Transient error: {operation}: {e}") from e
        else:
            raise StorageError(f"S3 error during {operation}: {e}") from e


def _error_code(e: Exception) -> str:
    if isinstance(e, ClientError):
        return str(e.response.get("Error", {}).get("Code", ""))
    return ""


async def build_s3_provider(config: StorageConfig) -> S3Provider:
    """Build S3 storage provider.

    Credentials are mandatory: the adapter is never built with ambient
    credentials picked up from the environment or shared config files.

    Args:
        config: Storage configuration

    Returns:
        Configured S3 provider instance
    """
    if not config.bucket:
        raise ConfigurationError("S3 bucket name is required")
    if not (config.aws_access_key_id and config.aws_secret_access_key):
        raise ConfigurationError(
            "S3 access key and secret key are required "
            "(STORAGE__AWS_ACCESS_KEY_ID / STORAGE__AWS_SECRET_ACCESS_KEY)"
        )

    import boto3
    from botocore.config import Config as BotoConfig

    boto_config = BotoConfig(
        region_name=config.region,
        signature_version="s3v4",
        retries={
            "max_attempts": config.max_retry_attempts,
            "mode": "standard"
        },
        connect_timeout=config.timeout,
        read_timeout=config.timeout
    )

    client_args = {
        "service_name": "s3",
        "config": boto_config,
        "aws_access_key_id": config.aws_access_key_id,
        "aws_secret_access_key": config.aws_secret_access_key,
    }

    if config.endpoint:
        client_args["endpoint_url"] = config.endpoint
        client_args["use_ssl"] = config.enable_ssl

    client = boto3.client(**client_args)
    provider = S3Provider(client, config)

    if not await provider.health_check():
        raise ConfigurationError(f"Failed to connect to S3 bucket '{config.bucket}'")

    return provider
