"""
Media module interface.

Other modules depend on IMediaService so the Cloudinary client can be
swapped for a fake in tests.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import MediaFile, MediaUpload, Transformation


@runtime_checkable
class IMediaService(Protocol):
    """Stores bytes on a media host and returns a public URL."""

    async def upload(
        self,
        file: MediaFile,
        folder: str,
        transformation: Optional[Transformation] = None,
    ) -> MediaUpload:
        """
        Upload a file.

        Raises:
            UploadError: If the media host fails or rejects the upload
        """
        ...

    async def delete(self, public_id: str) -> None:
        """Remove a previously uploaded asset. Failures are logged, not raised."""
        ...
