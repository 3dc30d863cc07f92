"""Tests for the Cloudinary media service."""

from unittest.mock import patch

import pytest
from cloudinary.exceptions import Error as CloudinaryError

from modules.media.exceptions import InvalidUploadError, UploadError
from modules.media.models import MediaFile, PROFILE_PICTURE_TRANSFORMATION
from modules.media.service import (
    CloudinaryMediaService,
    MAX_IMAGE_BYTES,
    upload_profile_picture,
    validate_image,
)
from shared.exceptions import ConfigurationError

from tests.conftest import PNG_BYTES


def image(content: bytes = PNG_BYTES, content_type: str = "image/png") -> MediaFile:
    return MediaFile(content=content, filename="me.png", content_type=content_type)


@pytest.fixture
def service() -> CloudinaryMediaService:
    return CloudinaryMediaService(
        cloud_name="demo",
        api_key="key-123",
        api_secret="shh",
        timeout=12.0,
    )


@pytest.fixture
def mock_upload():
    with patch("cloudinary.uploader.upload") as upload:
        upload.return_value = {
            "secure_url": "https://res.cloudinary.com/demo/p.png",
            "public_id": "profile-pictures/p",
        }
        yield upload


@pytest.fixture
def mock_destroy():
    with patch("cloudinary.uploader.destroy") as destroy:
        destroy.return_value = {"result": "ok"}
        yield destroy


class TestValidateImage:
    def test_accepts_image(self):
        validate_image(image())

    def test_rejects_empty(self):
        with pytest.raises(InvalidUploadError, match="empty"):
            validate_image(image(content=b""))

    def test_rejects_too_large(self):
        with pytest.raises(InvalidUploadError, match="File too large"):
            validate_image(image(content=b"x" * (MAX_IMAGE_BYTES + 1)))

    def test_rejects_non_image(self):
        with pytest.raises(InvalidUploadError, match="Only image files"):
            validate_image(image(content_type="text/plain"))


class TestUpload:
    @pytest.mark.asyncio
    async def test_success(self, service, mock_upload):
        result = await service.upload(
            image(), folder="profile-pictures", transformation=PROFILE_PICTURE_TRANSFORMATION
        )

        assert result.url == "https://res.cloudinary.com/demo/p.png"
        assert result.public_id == "profile-pictures/p"

        stream = mock_upload.call_args.args[0]
        assert stream.read() == PNG_BYTES
        options = mock_upload.call_args.kwargs
        assert options["folder"] == "profile-pictures"
        assert options["transformation"] == PROFILE_PICTURE_TRANSFORMATION
        assert options["resource_type"] == "auto"
        assert options["cloud_name"] == "demo"
        assert options["api_key"] == "key-123"
        assert options["api_secret"] == "shh"
        assert options["timeout"] == 12.0

    @pytest.mark.asyncio
    async def test_without_transformation(self, service, mock_upload):
        await service.upload(image(), folder="profile-pictures")
        assert "transformation" not in mock_upload.call_args.kwargs

    @pytest.mark.asyncio
    async def test_sdk_error(self, service, mock_upload):
        mock_upload.side_effect = CloudinaryError("Invalid image file")

        with pytest.raises(UploadError) as exc_info:
            await service.upload(image(), folder="profile-pictures")
        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Failed to upload profile picture"
        assert exc_info.value.details["original_error"] == "Invalid image file"

    @pytest.mark.asyncio
    async def test_malformed_response(self, service, mock_upload):
        mock_upload.return_value = {"unexpected": True}

        with pytest.raises(UploadError):
            await service.upload(image(), folder="profile-pictures")

    @pytest.mark.asyncio
    async def test_not_configured(self, mock_upload):
        service = CloudinaryMediaService(cloud_name="", api_key="", api_secret="")
        assert service.is_configured is False
        with pytest.raises(ConfigurationError):
            await service.upload(image(), folder="profile-pictures")
        mock_upload.assert_not_called()


class TestDelete:
    @pytest.mark.asyncio
    async def test_destroys_asset(self, service, mock_destroy):
        await service.delete("profile-pictures/p")

        assert mock_destroy.call_args.args == ("profile-pictures/p",)
        assert mock_destroy.call_args.kwargs["cloud_name"] == "demo"

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, service, mock_destroy):
        mock_destroy.side_effect = CloudinaryError("Resource not found")
        await service.delete("profile-pictures/p")

    @pytest.mark.asyncio
    async def test_empty_public_id_is_ignored(self, service, mock_destroy):
        await service.delete("")
        mock_destroy.assert_not_called()


class TestUploadProfilePicture:
    @pytest.mark.asyncio
    async def test_uses_profile_folder_and_square_crop(self, service, mock_upload):
        await upload_profile_picture(service, image())

        options = mock_upload.call_args.kwargs
        assert options["folder"] == "profile-pictures"
        assert options["transformation"] == [
            {"width": 400, "height": 400, "crop": "fill"},
            {"quality": "auto"},
        ]

    @pytest.mark.asyncio
    async def test_validates_before_upload(self, service, mock_upload):
        with pytest.raises(InvalidUploadError):
            await upload_profile_picture(service, image(content_type="text/plain"))
        mock_upload.assert_not_called()
