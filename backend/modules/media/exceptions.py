"""
Media module exceptions.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, ValidationError


class UploadError(ExternalServiceError):
    """Raised when the media host rejects or fails an upload."""

    def __init__(
        self,
        message: str = "Failed to upload profile picture",
        original_error: Optional[str] = None,
    ):
        super().__init__(
            message,
            service="cloudinary",
            code="UPLOAD_FAILED",
            details={"original_error": original_error},
        )


class InvalidUploadError(ValidationError):
    """Raised when an uploaded file is not an acceptable image."""

    def __init__(self, message: str):
        super().__init__(message, errors=[message], code="INVALID_UPLOAD")
