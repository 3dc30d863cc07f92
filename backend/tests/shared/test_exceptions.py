"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DuplicateError,
    ExternalServiceError,
    NotFoundError,
    UserbaseError,
    ValidationError,
)


class TestUserbaseError:
    def test_message(self):
        """UserbaseError should store message."""
        error = UserbaseError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """UserbaseError should default code to class name."""
        assert UserbaseError("Test error").code == "UserbaseError"

    def test_custom_code_and_details(self):
        error = UserbaseError("Test error", code="CUSTOM_ERROR", details={"key": "value"})
        assert error.code == "CUSTOM_ERROR"
        assert error.details == {"key": "value"}

    def test_to_dict(self):
        error = UserbaseError("Test error", code="TEST_ERROR", details={"key": "value"})
        assert error.to_dict() == {
            "error": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
        }


@pytest.mark.parametrize(
    "cls,status",
    [
        (UserbaseError, 500),
        (NotFoundError, 404),
        (ValidationError, 400),
        (DuplicateError, 400),
        (AuthenticationError, 401),
        (AuthorizationError, 403),
        (ConfigurationError, 500),
    ],
)
def test_status_codes(cls, status):
    assert cls.status_code == status
    assert issubclass(cls, UserbaseError)


class TestValidationError:
    def test_default_message(self):
        assert ValidationError().message == "Validation failed"

    def test_errors_in_dict(self):
        error = ValidationError(errors=["First name is required", "Please enter a valid email"])
        result = error.to_dict()
        assert result["errors"] == ["First name is required", "Please enter a valid email"]

    def test_no_errors_key_when_empty(self):
        assert "errors" not in ValidationError("Bad").to_dict()


class TestExternalServiceError:
    def test_status_and_service(self):
        error = ExternalServiceError("Connection failed", service="cloudinary")
        assert error.status_code == 502
        assert error.service == "cloudinary"
        assert error.to_dict()["details"]["service"] == "cloudinary"

    def test_preserves_other_details(self):
        error = ExternalServiceError(
            "Connection failed", service="cloudinary", details={"status_code": 500}
        )
        assert error.details == {"status_code": 500, "service": "cloudinary"}
