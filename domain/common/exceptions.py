"""Domain business exceptions shared by the domain, application and infrastructure layers.

The core layer only maps them to HTTP responses; nothing here depends on core.
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """Base class for business exceptions."""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class AttachmentNotFoundError(BusinessException):
    def __init__(self, record_id: int):
        super().__init__(
            code=BusinessCode.ATTACHMENT_NOT_FOUND,
            message=f"Attachment {record_id} has no resolvable URL",
            error_type="AttachmentNotFound",
            details={"record_id": record_id},
        )


class UploadPathMismatchError(BusinessException):
    """URL does not live under the host's upload base URL."""

    def __init__(self, url: str, base_url: str):
        super().__init__(
            code=BusinessCode.UPLOAD_PATH_MISMATCH,
            message=f"URL is outside the upload root: {url}",
            error_type="UploadPathMismatch",
            details={"url": url, "base_url": base_url},
            field="url",
        )


class RemoteOperationError(BusinessException):
    def __init__(self, operation: str, key: str, reason: Optional[str] = None):
        super().__init__(
            code=BusinessCode.STORAGE_ERROR,
            message=f"Remote {operation} failed for {key}",
            error_type="RemoteOperationFailed",
            details={"operation": operation, "key": key, "reason": reason},
        )


class MediaSyncConfigurationError(BusinessException):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            code=BusinessCode.CONFIGURATION_ERROR,
            message=message,
            error_type="ConfigurationError",
            field=field,
        )


class InvalidLocalPathError(BusinessException):
    """Local path escapes the upload base directory."""

    def __init__(self, path: str, base_dir: str):
        super().__init__(
            code=BusinessCode.PARAM_ERROR,
            message=f"Path escapes the upload directory: {path}",
            error_type="InvalidLocalPath",
            details={"path": path, "base_dir": base_dir},
            field="file",
        )
