"""
Cloudinary media service.

Wraps the Cloudinary SDK. Its calls are blocking, so they run in a worker
thread. Files are uploaded from memory, so a failed upload leaves no local
file behind to clean up.
"""

import asyncio
import io
import logging
from typing import Any, Optional

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from shared.exceptions import ConfigurationError
from .exceptions import InvalidUploadError, UploadError
from .models import (
    MediaFile,
    MediaUpload,
    PROFILE_PICTURE_FOLDER,
    PROFILE_PICTURE_TRANSFORMATION,
    Transformation,
)

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024


def validate_image(file: MediaFile, max_bytes: int = MAX_IMAGE_BYTES) -> None:
    """
    Reject files that are empty, too large, or not images.

    Raises:
        InvalidUploadError: With a client-facing message
    """
    if file.size == 0:
        raise InvalidUploadError("Uploaded file is empty")
    if file.size > max_bytes:
        raise InvalidUploadError(
            f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB"
        )
    if not (file.content_type or "").startswith("image/"):
        raise InvalidUploadError("Only image files are allowed")


class CloudinaryMediaService:
    """
    IMediaService implementation backed by Cloudinary.

    Credentials are passed with every SDK call rather than through the
    global ``cloudinary.config()``.

    Args:
        cloud_name: Cloudinary cloud name
        api_key: Cloudinary API key
        api_secret: Cloudinary API secret
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 30.0,
    ):
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self._cloud_name and self._api_key and self._api_secret)

    def _options(self, **options: Any) -> dict[str, Any]:
        return {
            "cloud_name": self._cloud_name,
            "api_key": self._api_key,
            "api_secret": self._api_secret,
            "timeout": self._timeout,
            **options,
        }

    async def upload(
        self,
        file: MediaFile,
        folder: str,
        transformation: Optional[Transformation] = None,
    ) -> MediaUpload:
        """Upload an image and return its secure URL."""
        if not self.is_configured:
            raise ConfigurationError(
                "Media upload not configured", code="MEDIA_NOT_CONFIGURED"
            )

        options = self._options(
            folder=folder,
            resource_type="auto",
            filename=file.filename,
        )
        if transformation:
            options["transformation"] = transformation

        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload, io.BytesIO(file.content), **options
            )
        except CloudinaryError as e:
            logger.warning(f"Cloudinary upload failed: {e}")
            raise UploadError(original_error=str(e))

        url = result.get("secure_url") or result.get("url")
        if not url or not result.get("public_id"):
            raise UploadError(original_error="Malformed upload response")

        logger.info(f"Uploaded {file.filename} to Cloudinary as {result['public_id']}")
        return MediaUpload(url=url, public_id=result["public_id"])

    async def delete(self, public_id: str) -> None:
        """Best-effort removal of an uploaded asset."""
        if not self.is_configured or not public_id:
            return
        try:
            await asyncio.to_thread(
                cloudinary.uploader.destroy, public_id, **self._options()
            )
        except CloudinaryError as e:
            logger.warning(f"Failed to delete Cloudinary asset {public_id}: {e}")


async def upload_profile_picture(media, file: MediaFile) -> MediaUpload:
    """Validate an image and upload it as a square profile picture."""
    validate_image(file)
    return await media.upload(
        file,
        folder=PROFILE_PICTURE_FOLDER,
        transformation=PROFILE_PICTURE_TRANSFORMATION,
    )
