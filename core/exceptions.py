"""
Exception to HTTP response mapping and global exception handlers.
"""
from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import traceback
import uuid
from starlette import status as http_status

from .response import error_response
from shared.codes import BusinessCode
from core.logging_config import get_logger
from domain.common.exceptions import BusinessException
from infrastructure.external.storage.exceptions import (
    StorageError,
    NotFoundError,
    PermissionDeniedError,
    TransientError,
    ValidationError as StorageValidationError,
)


def _request_id(request: Request) -> str:
    return getattr(getattr(request, "state", object()), "request_id", None) or str(uuid.uuid4())


def register_exception_handlers(app: FastAPI):
    """
    Register global exception handlers.

    Args:
        app: FastAPI application
    """

    logger = get_logger(__name__)

    def _business_code_to_http_status(code: int) -> int:
        """Map a business code to an HTTP status (400 by default)."""
        mapping = {
            BusinessCode.PARAM_ERROR: http_status.HTTP_400_BAD_REQUEST,
            BusinessCode.PARAM_MISSING: http_status.HTTP_400_BAD_REQUEST,
            BusinessCode.PARAM_TYPE_ERROR: http_status.HTTP_400_BAD_REQUEST,
            BusinessCode.PARAM_VALIDATION_ERROR: http_status.HTTP_422_UNPROCESSABLE_ENTITY,

            BusinessCode.BUSINESS_ERROR: http_status.HTTP_400_BAD_REQUEST,
            BusinessCode.NOT_FOUND: http_status.HTTP_404_NOT_FOUND,
            BusinessCode.ATTACHMENT_NOT_FOUND: http_status.HTTP_404_NOT_FOUND,
            BusinessCode.UPLOAD_PATH_MISMATCH: http_status.HTTP_400_BAD_REQUEST,

            BusinessCode.SYSTEM_ERROR: http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            BusinessCode.NETWORK_ERROR: http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            BusinessCode.SERVICE_UNAVAILABLE: http_status.HTTP_503_SERVICE_UNAVAILABLE,
            BusinessCode.STORAGE_ERROR: http_status.HTTP_502_BAD_GATEWAY,
            BusinessCode.CONFIGURATION_ERROR: http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        }
        try:
            return mapping.get(BusinessCode(code), http_status.HTTP_400_BAD_REQUEST)
        except ValueError:
            return http_status.HTTP_400_BAD_REQUEST

    @app.exception_handler(BusinessException)
    async def business_exception_handler(request: Request, exc: BusinessException):
        """Business exceptions."""
        response = error_response(
            code=exc.code,
            message=exc.message,
            error_type=exc.error_type,
            details=exc.details,
            field=exc.field,
            request_id=_request_id(request),
        )
        status_code = _business_code_to_http_status(exc.code)
        return JSONResponse(status_code=status_code, content=response.model_dump(mode='json'))

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        """Storage provider errors that escaped the service layer."""
        if isinstance(exc, NotFoundError):
            status_code, code = http_status.HTTP_404_NOT_FOUND, BusinessCode.NOT_FOUND
        elif isinstance(exc, StorageValidationError):
            status_code, code = http_status.HTTP_400_BAD_REQUEST, BusinessCode.PARAM_ERROR
        elif isinstance(exc, PermissionDeniedError):
            status_code, code = http_status.HTTP_502_BAD_GATEWAY, BusinessCode.STORAGE_ERROR
        elif isinstance(exc, TransientError):
            status_code, code = http_status.HTTP_503_SERVICE_UNAVAILABLE, BusinessCode.SERVICE_UNAVAILABLE
        else:
            status_code, code = http_status.HTTP_502_BAD_GATEWAY, BusinessCode.STORAGE_ERROR
        logger.warning("storage_error", error=str(exc), error_type=type(exc).__name__)
        response = error_response(
            code=code,
            message=str(exc),
            error_type=type(exc).__name__,
            request_id=_request_id(request),
        )
        return JSONResponse(status_code=status_code, content=response.model_dump(mode='json'))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Request validation errors."""
        errors = exc.errors()
        first_error = errors[0] if errors else {}
        field = ".".join(str(loc) for loc in first_error.get("loc", [])[1:])

        response = error_response(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=f"Validation failed: {first_error.get('msg', 'unknown')}",
            error_type="ValidationError",
            details={"errors": errors},
            field=field,
            request_id=_request_id(request),
        )
        return JSONResponse(
            status_code=http_status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=response.model_dump(mode='json')
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """HTTP exceptions."""
        code_mapping = {
            404: BusinessCode.NOT_FOUND,
            500: BusinessCode.SYSTEM_ERROR,
            503: BusinessCode.SERVICE_UNAVAILABLE
        }
        code = code_mapping.get(exc.status_code, BusinessCode.SYSTEM_ERROR)
        response = error_response(
            code=code,
            message=str(exc.detail),
            error_type="HTTPError",
            details={"status_code": exc.status_code},
            request_id=_request_id(request),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=response.model_dump(mode='json'),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Anything not handled above."""
        request_id = _request_id(request)
        details = None
        if app.debug:
            details = {
                "exception": str(exc),
                "traceback": traceback.format_exc()
            }

        response = error_response(
            code=BusinessCode.SYSTEM_ERROR,
            message="Internal server error",
            error_type="SystemError",
            details=details,
            request_id=request_id,
        )

        logger.error(
            "unhandled_exception",
            request_id=request_id,
            error=str(exc),
            exc_info=True,
        )

        return JSONResponse(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=response.model_dump(mode='json')
        )
