"""Storage provider exceptions."""


class StorageError(Exception):
    """Base storage exception."""
    pass


class NotFoundError(StorageError):
    """Object or local file not found."""
    pass


class PermissionDeniedError(StorageError):
    """Permission denied for storage operation."""
    pass


class TransientError(StorageError):
    """Transient error (network, throttling, server error)."""
    pass


class ConfigurationError(StorageError):
    """Storage configuration error (missing bucket, credentials...)."""
    pass


class ValidationError(StorageError):
    """Invalid key or path."""
    pass
