"""
Media module data models.
"""

from dataclasses import dataclass
from typing import Any, Optional
from pydantic import BaseModel, Field


@dataclass(frozen=True)
class MediaFile:
    """An uploaded file held in memory."""

    content: bytes
    filename: str = "upload"
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


class MediaUpload(BaseModel):
    """Result of a successful upload to the media host."""

    url: str = Field(..., description="HTTPS URL of the stored asset")
    public_id: str = Field(..., description="Media host identifier, used for deletion")


# Cloudinary transformation chain, applied in order on the media host
Transformation = list[dict[str, Any]]

# Profile pictures are cropped to a square on the media host
PROFILE_PICTURE_FOLDER = "profile-pictures"
PROFILE_PICTURE_TRANSFORMATION: Transformation = [
    {"width": 400, "height": 400, "crop": "fill"},
    {"quality": "auto"},
]
