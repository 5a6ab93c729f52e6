"""
Global Exception Handlers

Every error leaving the API is rendered with the same envelope:
{
    "error": {
        "status_code": 404,
        "error_code": "RESOURCE_CONTENT_TYPE_NOT_FOUND",
        "message": "Content type with id 'faq' not found",
        "type": "Not Found",
        "details": {"resource_type": "Content type", "resource_id": "faq"},
        "path": "/api/v1/content-types/faq"
    }
}
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.exceptions import CMSError, ErrorCode

logger = logging.getLogger(__name__)

ERROR_TYPES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    422: "Validation Error",
    500: "Internal Server Error",
    503: "Service Unavailable",
}

HTTP_ERROR_CODES = {
    400: ErrorCode.VALIDATION_FAILED,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    409: ErrorCode.VALIDATION_DUPLICATE_RESOURCE,
    422: ErrorCode.VALIDATION_FAILED,
    500: ErrorCode.INTERNAL_ERROR,
    502: ErrorCode.SERVICE_UNAVAILABLE,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


def create_error_response(
    status_code: int,
    message: str,
    error_code: str | ErrorCode | None = None,
    details: dict[str, Any] | None = None,
    path: str | None = None,
) -> JSONResponse:
    """
    Build the error envelope.

    Args:
        status_code: HTTP status code
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Extra context (field, resource id, table...)
        path: Request path that caused the error
    """
    body: dict[str, Any] = {"status_code": status_code, "message": message, "type": get_error_type(status_code)}
    if error_code:
        body["error_code"] = error_code.value if isinstance(error_code, ErrorCode) else error_code
    if details:
        body["details"] = details
    if path:
        body["path"] = path
    return JSONResponse(status_code=status_code, content={"error": body})


def get_error_type(status_code: int) -> str:
    return ERROR_TYPES.get(status_code, "Error")


def get_http_error_code(status_code: int) -> str:
    """Error code for a plain HTTPException (unknown routes, wrong methods)."""
    return HTTP_ERROR_CODES.get(status_code, ErrorCode.UNKNOWN_ERROR).value


def _validation_errors(exc: RequestValidationError | PydanticValidationError) -> list[dict[str, str]]:
    # Request errors carry a leading "body"/"query" location segment
    skip = ("body",) if isinstance(exc, RequestValidationError) else ()
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc not in skip),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


async def cms_exception_handler(request: Request, exc: CMSError) -> JSONResponse:
    """
    Handle pipeline exceptions (validation, not found, widget resolution, schema sync).

    5xx errors point at a registry or database problem and are logged as errors;
    client errors are logged as warnings.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "%s: %s",
        type(exc).__name__,
        exc.message,
        extra={"status_code": exc.status_code, "path": request.url.path, **_log_extra(exc.details)},
    )
    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details or None,
        path=request.url.path,
    )


def _log_extra(details: dict[str, Any]) -> dict[str, Any]:
    # Only keys the structured formatter knows about, never LogRecord attributes
    return {key: details[key] for key in ("field_type", "table", "operation") if key in details}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("HTTPException: %s", exc.detail, extra={"status_code": exc.status_code, "path": request.url.path})
    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code=get_http_error_code(exc.status_code),
        path=request.url.path,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError | PydanticValidationError
) -> JSONResponse:
    """Handle malformed request bodies (unknown keys, wrong JSON types)."""
    errors = _validation_errors(exc)
    logger.warning("Validation error on %s (%d problems)", request.url.path, len(errors))
    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Validation error",
        error_code=ErrorCode.VALIDATION_FAILED,
        details={"validation_errors": errors},
        path=request.url.path,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internal details."""
    logger.exception("Unhandled exception: %s", exc, extra={"path": request.url.path, "method": request.method})
    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="An unexpected error occurred. Please try again later.",
        error_code=ErrorCode.INTERNAL_ERROR,
        path=request.url.path,
    )


def register_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(CMSError, cms_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
