"""
Tests for custom exception classes and the exception handlers

Tests exception initialization, messages, status codes, and the error response format.
"""

from fastapi import status

from app.exception_handlers import create_error_response, get_error_type, get_http_error_code
from app.exceptions import (
    CMSError,
    ContentTypeNotFoundError,
    DuplicateResourceError,
    ErrorCode,
    FieldTypeNotFoundError,
    NotFoundError,
    SchemaSyncError,
    ValidationError,
    WidgetNotFoundError,
    WidgetResolutionError,
)


class TestCMSError:
    """Test base CMSError class"""

    def test_cms_exception_default(self):
        """Test CMSError with default values"""
        exc = CMSError("Test error")
        assert str(exc) == "Test error"
        assert exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert exc.details == {}
        assert exc.error_code == ErrorCode.INTERNAL_ERROR

    def test_cms_exception_with_error_code(self):
        """Test overriding the error code"""
        exc = CMSError("Down", status_code=503, error_code=ErrorCode.SERVICE_UNAVAILABLE)
        assert exc.error_code == ErrorCode.SERVICE_UNAVAILABLE


class TestValidationExceptions:
    """Test validation-related exceptions"""

    def test_validation_error(self):
        """Test ValidationError with field and errors"""
        exc = ValidationError("Bad input", field="label", errors=["Label is required"])
        assert exc.status_code == status.HTTP_400_BAD_REQUEST
        assert exc.details == {"field": "label", "errors": ["Label is required"]}
        assert exc.errors == ["Label is required"]

    def test_duplicate_resource_error(self):
        """Test DuplicateResourceError message and inheritance"""
        exc = DuplicateResourceError("Content type", "id", "faq")
        assert isinstance(exc, ValidationError)
        assert exc.message == "Content type with id 'faq' already exists"
        assert exc.error_code == ErrorCode.VALIDATION_DUPLICATE_RESOURCE
        assert exc.details["value"] == "faq"


class TestNotFoundExceptions:
    """Test resource not found exceptions"""

    def test_not_found_without_id(self):
        """Test message when no id is given"""
        assert NotFoundError("Field").message == "Field not found"

    def test_field_type_not_found(self):
        """Test FieldTypeNotFoundError"""
        exc = FieldTypeNotFoundError("hologram")
        assert exc.status_code == status.HTTP_404_NOT_FOUND
        assert exc.message == "Field type with id 'hologram' not found"

    def test_content_type_not_found_resource_type(self):
        """Test the resource type label for block types"""
        exc = ContentTypeNotFoundError("cta", resource_type="Block type")
        assert exc.message == "Block type with id 'cta' not found"
        assert exc.error_code == ErrorCode.RESOURCE_CONTENT_TYPE_NOT_FOUND

    def test_widget_not_found(self):
        """Test WidgetNotFoundError"""
        assert WidgetNotFoundError("nope").details == {"resource_type": "Widget", "resource_id": "nope"}


class TestServerErrors:
    """Test setup and schema errors"""

    def test_widget_resolution_error(self):
        """Test WidgetResolutionError details"""
        exc = WidgetResolutionError("hologram", "blob")
        assert exc.status_code == 500
        assert exc.details == {"field_type": "hologram", "machine_name": "blob"}

    def test_schema_sync_error(self):
        """Test SchemaSyncError details"""
        exc = SchemaSyncError("failed", table="content_faq", operation="add column")
        assert exc.details == {"table": "content_faq", "operation": "add column"}


class TestErrorResponses:
    """Test the error response helpers"""

    def test_create_error_response(self):
        """Test the standard error body"""
        response = create_error_response(404, "Missing", ErrorCode.RESOURCE_NOT_FOUND, {"id": 1}, "/x")
        assert response.status_code == 404
        assert b'"error_code":"RESOURCE_NOT_FOUND"' in response.body
        assert b'"type":"Not Found"' in response.body
        assert b'"path":"/x"' in response.body

    def test_error_types(self):
        """Test status code labels"""
        assert get_error_type(400) == "Bad Request"
        assert get_error_type(418) == "Error"

    def test_http_error_codes(self):
        """Test HTTP status to error code mapping"""
        assert get_http_error_code(404) == "RESOURCE_NOT_FOUND"
        assert get_http_error_code(418) == "UNKNOWN_ERROR"
