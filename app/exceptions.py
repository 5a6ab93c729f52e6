"""
Custom Exception Classes for the content-type pipeline

This module defines the exceptions raised by field types, field definitions,
the widget registry and the content/block type managers. Each carries an HTTP
status code and a machine-readable error code so the HTTP layer can render a
consistent error response.
"""

import enum
from typing import Any

from fastapi import status


class ErrorCode(str, enum.Enum):
    """Machine-readable error codes, usable by frontends for i18n."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_DUPLICATE_RESOURCE = "VALIDATION_DUPLICATE_RESOURCE"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_FIELD_TYPE_NOT_FOUND = "RESOURCE_FIELD_TYPE_NOT_FOUND"
    RESOURCE_CONTENT_TYPE_NOT_FOUND = "RESOURCE_CONTENT_TYPE_NOT_FOUND"
    RESOURCE_WIDGET_NOT_FOUND = "RESOURCE_WIDGET_NOT_FOUND"
    WIDGET_RESOLUTION_FAILED = "WIDGET_RESOLUTION_FAILED"
    SCHEMA_SYNC_FAILED = "SCHEMA_SYNC_FAILED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class CMSException(Exception):
    """Base exception class for all CMS-related exceptions"""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


# Alias used by the exception handlers
CMSError = CMSException


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(CMSException):
    """Raised when input validation fails (missing label, bad id, duplicates)"""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
        errors: list[str] | None = None,
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
        if errors:
            error_details["errors"] = list(errors)
        self.errors = list(errors or [])
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)


class DuplicateResourceError(ValidationError):
    """Raised when an id or machine name is already taken"""

    error_code = ErrorCode.VALIDATION_DUPLICATE_RESOURCE

    def __init__(self, resource_type: str, field: str, value: Any):
        super().__init__(
            message=f"{resource_type} with {field} '{value}' already exists",
            field=field,
            details={"resource_type": resource_type, "value": value},
        )


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class NotFoundError(CMSException):
    """Base class for resource not found errors"""

    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class FieldTypeNotFoundError(NotFoundError):
    """Raised when a field type id is unknown"""

    error_code = ErrorCode.RESOURCE_FIELD_TYPE_NOT_FOUND

    def __init__(self, field_type: Any | None = None):
        super().__init__(resource_type="Field type", resource_id=field_type)


class ContentTypeNotFoundError(NotFoundError):
    """Raised when a content or block type is unknown"""

    error_code = ErrorCode.RESOURCE_CONTENT_TYPE_NOT_FOUND

    def __init__(self, type_id: Any | None = None, resource_type: str = "Content type"):
        super().__init__(resource_type=resource_type, resource_id=type_id)


class WidgetNotFoundError(NotFoundError):
    """Raised when a widget id is not registered"""

    error_code = ErrorCode.RESOURCE_WIDGET_NOT_FOUND

    def __init__(self, widget_id: Any | None = None):
        super().__init__(resource_type="Widget", resource_id=widget_id)


# ============================================================================
# Configuration & Schema Exceptions
# ============================================================================


class WidgetResolutionError(CMSException):
    """Raised when no registered widget supports a field type (registry setup bug)"""

    error_code = ErrorCode.WIDGET_RESOLUTION_FAILED

    def __init__(self, field_type: str, machine_name: str | None = None):
        details: dict[str, Any] = {"field_type": field_type}
        if machine_name:
            details["machine_name"] = machine_name
        super().__init__(
            message=f"No widget supports field type '{field_type}'",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


class SchemaSyncError(CMSException):
    """Raised when a physical CREATE/ALTER/DROP TABLE statement fails"""

    error_code = ErrorCode.SCHEMA_SYNC_FAILED

    def __init__(self, message: str, table: str | None = None, operation: str | None = None):
        details: dict[str, Any] = {}
        if table:
            details["table"] = table
        if operation:
            details["operation"] = operation
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)
