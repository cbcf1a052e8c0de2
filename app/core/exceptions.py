"""
Global exception handling for the application.
Every failure leaves the API as {"error": {"status", "message", "details"?}}.
"""

import traceback
from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings

settings = get_settings()
logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Any] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationException(AppError):
    """Input rejected by a business rule."""
    def __init__(self, message: str = "Validation failed", details: Optional[Any] = None):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY, details)


class BadRequestException(AppError):
    def __init__(self, message: str = "Bad request", details: Optional[Any] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class InvalidRoleException(BadRequestException):
    def __init__(self, role: Any = None):
        super().__init__("Invalid user role", {"role": role} if role is not None else None)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "Unauthorized", details: Optional[Any] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details)


class ForbiddenException(AppError):
    """Authorization failure error."""
    def __init__(self, message: str = "Forbidden", details: Optional[Any] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Entity not found", details: Optional[Any] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class ConflictException(AppError):
    """Duplicate email, identifier or active invitation."""
    def __init__(self, message: str = "Conflict", details: Optional[Any] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class VoucherRenderingError(AppError):
    def __init__(self, message: str = "Error generating PDF voucher", details: Optional[Any] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


def error_body(status_code: int, message: str, details: Optional[Any] = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"status": status_code, "message": message}
    if details:
        error["details"] = details
    return {"error": error}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Application error", path=request.url.path, message=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.message, exc.details),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and parameters, reported field by field."""
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed", details),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Resource not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.exception("Unexpected error occurred", path=request.url.path)

    content = error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
    if settings.ENVIRONMENT != "production":
        content["error"]["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
