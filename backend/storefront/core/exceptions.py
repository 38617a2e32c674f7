"""
Centralized Exception Handling for the Storefront API

This module provides:
- Custom exception classes for each error kind
- The standard error envelope: {"success": false, "error": "..."}
- Exception handlers registered on the FastAPI app
"""

import logging
from typing import Dict, Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

__all__ = [
    "StorefrontError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "InvalidTableError",
    "StoreFailureError",
    "UploadFailureError",
    "ConfigurationError",
    "error_response",
    "register_exception_handlers",
]


class StorefrontError(Exception):
    """Base exception for the Storefront API"""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """Missing or malformed required field"""

    def __init__(self, message: str = "Validation failed", details: Dict[str, Any] = None):
        super().__init__(message, "VALIDATION_ERROR", 400, details)


class AuthenticationError(StorefrontError):
    def __init__(self, message: str = "Authentication failed", details: Dict[str, Any] = None):
        super().__init__(message, "AUTH_ERROR", 401, details)


class AuthorizationError(StorefrontError):
    def __init__(self, message: str = "Access denied", details: Dict[str, Any] = None):
        super().__init__(message, "FORBIDDEN", 403, details)


class NotFoundError(StorefrontError):
    def __init__(self, message: str = "Resource not found", details: Dict[str, Any] = None):
        super().__init__(message, "NOT_FOUND", 404, details)


class ConflictError(StorefrontError):
    """A conditional write found an existing record"""

    def __init__(self, message: str = "Resource already exists", details: Dict[str, Any] = None):
        super().__init__(message, "CONFLICT", 409, details)


class InvalidTableError(StorefrontError):
    """Unknown logical table name in batch-delete dispatch"""

    def __init__(self, message: str = "Invalid table name specified.", details: Dict[str, Any] = None):
        super().__init__(message, "INVALID_TABLE", 400, details)


class StoreFailureError(StorefrontError):
    """The document store rejected a call"""

    def __init__(self, message: str = "Database operation failed", details: Dict[str, Any] = None):
        super().__init__(message, "STORE_FAILURE", 500, details)


class UploadFailureError(StorefrontError):
    """The object store write failed or returned no location"""

    def __init__(self, message: str = "Image upload failed.", details: Dict[str, Any] = None):
        super().__init__(message, "UPLOAD_FAILURE", 502, details)


class ConfigurationError(StorefrontError):
    """Raised at startup when settings cannot produce a working service"""

    def __init__(self, message: str = "Invalid configuration", details: Dict[str, Any] = None):
        super().__init__(message, "CONFIGURATION_ERROR", 500, details)


def error_response(message: str, status_code: int, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


async def storefront_exception_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.error_code, **exc.details},
    )
    return error_response(exc.message, exc.status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(str(exc.detail), exc.status_code, getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.info(f"Request validation failed on {request.url.path}: {message}")
    return error_response(message, status.HTTP_400_BAD_REQUEST)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
