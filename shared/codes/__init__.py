"""
Shared business codes used across layers (Domain/Core/API).

Single source of truth for the codes carried in the unified response
envelope and in business exceptions.
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    """Unified business status codes (single source of truth)."""

    # Success
    SUCCESS = 0

    # Parameter errors (1xxxx)
    PARAM_ERROR = 10000
    PARAM_MISSING = 10001
    PARAM_TYPE_ERROR = 10002
    PARAM_VALIDATION_ERROR = 10003

    # Business errors (2xxxx)
    BUSINESS_ERROR = 20000
    NOT_FOUND = 20006  # Generic resource not found
    ATTACHMENT_NOT_FOUND = 20101
    UPLOAD_PATH_MISMATCH = 20102

    # System errors (4xxxx)
    SYSTEM_ERROR = 40000
    NETWORK_ERROR = 40002
    SERVICE_UNAVAILABLE = 40003
    STORAGE_ERROR = 40101
    CONFIGURATION_ERROR = 40102


__all__ = ["BusinessCode"]
