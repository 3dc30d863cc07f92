"""
Media module.

Uploads profile pictures to Cloudinary.

Public API:
- IMediaService: Interface for uploads
- MediaFile, MediaUpload: Input and result models
- UploadError, InvalidUploadError: Failures
"""

from .interfaces import IMediaService
from .models import MediaFile, MediaUpload
from .exceptions import UploadError, InvalidUploadError

__all__ = [
    "IMediaService",
    "MediaFile",
    "MediaUpload",
    "UploadError",
    "InvalidUploadError",
]
