"""
Custom exception classes and error handling for Request Ledger.

Provides consistent error envelopes across all API endpoints.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from .utils.logging import get_logger

logger = get_logger(__name__)

# Replaces server-side error details outside development
HIDDEN_ERROR_DETAIL = "Internal error"


class ErrorResponse(BaseModel):
    """Standard error envelope."""
    success: bool = False
    message: str
    error: str
    error_code: str | None = None
    data: dict[str, Any] | None = None


class APIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None,
        detail: str | None = None,
        data: dict[str, Any] | None = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.detail = detail or message
        self.data = data
        super().__init__(message)


class NotFoundError(APIException):
    """Exception raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            message=f"{resource_type} with id {resource_id} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND"
        )


class ValidationError(APIException):
    """Exception raised when request validation fails."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="VALIDATION_ERROR"
        )


class TransportError(APIException):
    """Exception raised when an outbound request fails below the HTTP layer."""

    def __init__(
        self,
        detail: str,
        elapsed_ms: int | None = None,
        message: str = "Failed to reach the remote server",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        error_code: str = "TRANSPORT_ERROR"
    ):
        self.elapsed_ms = elapsed_ms
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            detail=detail
        )


class TimeoutError(TransportError):
    """Exception raised when an outbound request times out."""

    def __init__(self, detail: str = "Request timed out", elapsed_ms: int | None = None):
        super().__init__(
            detail=detail,
            elapsed_ms=elapsed_ms,
            message="Request timed out",
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            error_code="TIMEOUT"
        )


class StorageError(APIException):
    """Exception raised when the history storage fails."""

    def __init__(self, detail: str = "Database error occurred"):
        super().__init__(
            message="Database error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="STORAGE_ERROR",
            detail=detail
        )


def _show_details(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return settings is None or settings.is_development


def error_response(
    request: Request,
    status_code: int,
    message: str,
    detail: str,
    error_code: str | None = None,
    data: dict[str, Any] | None = None
) -> JSONResponse:
    """Build the error envelope, hiding server-side details outside development."""
    if status_code >= 500 and not _show_details(request):
        detail = HIDDEN_ERROR_DETAIL

    body = ErrorResponse(message=message, error=detail, error_code=error_code, data=data)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True)
    )


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handler for custom API exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "api_error",
        path=request.url.path,
        status_code=exc.status_code,
        error_code=exc.error_code,
        detail=exc.detail,
    )
    return error_response(
        request,
        status_code=exc.status_code,
        message=exc.message,
        detail=exc.detail,
        error_code=exc.error_code,
        data=exc.data
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    errors = exc.errors()
    # Format validation errors into a readable message
    error_messages = []
    for error in errors:
        loc = " -> ".join(str(l) for l in error["loc"])
        msg = error["msg"]
        error_messages.append(f"{loc}: {msg}")

    detail = "; ".join(error_messages) if error_messages else "Validation error"

    logger.warning("request_validation_failed", path=request.url.path, detail=detail)
    return error_response(
        request,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message=detail,
        detail=detail,
        error_code="VALIDATION_ERROR"
    )


async def sqlalchemy_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Handler for SQLAlchemy errors that escaped the storage layer."""
    logger.error("database_error", path=request.url.path, error=str(exc))
    return error_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Database error occurred",
        detail=str(exc),
        error_code="STORAGE_ERROR"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
