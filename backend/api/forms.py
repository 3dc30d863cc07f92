"""
Request body parsing for endpoints that accept uploads.

Signup and profile editing take either a JSON body or a multipart form
with an optional ``profilePicture`` file. In a form, nested objects
(``address``, ``socialLinks``) are sent as JSON strings.
"""

import json
from typing import Any, Optional, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from modules.media.models import MediaFile
from shared.exceptions import ValidationError

PICTURE_FIELD = "profilePicture"
NESTED_FORM_FIELDS = ("address", "socialLinks", "social_links")

M = TypeVar("M", bound=BaseModel)


def _is_multipart(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded"))


async def _read_upload(upload: UploadFile) -> Optional[MediaFile]:
    if not upload.filename:
        return None
    content = await upload.read()
    return MediaFile(
        content=content,
        filename=upload.filename,
        content_type=upload.content_type,
    )


async def read_payload(request: Request) -> tuple[dict[str, Any], Optional[MediaFile]]:
    """
    Read a JSON or form body.

    Returns:
        The body fields and the uploaded picture, if any

    Raises:
        ValidationError: If the body cannot be parsed
    """
    if not _is_multipart(request):
        raw = await request.body()
        if not raw:
            return {}, None
        try:
            data = json.loads(raw)
        except ValueError:
            raise ValidationError("Invalid JSON body", errors=["Invalid JSON body"])
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON body", errors=["Body must be an object"])
        return data, None

    form = await request.form()
    data: dict[str, Any] = {}
    picture: Optional[MediaFile] = None
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == PICTURE_FIELD:
                picture = await _read_upload(value)
            continue
        if key in NESTED_FORM_FIELDS and value:
            try:
                data[key] = json.loads(value)
            except ValueError:
                raise ValidationError(
                    f"Invalid {key} format", errors=[f"{key} must be a JSON object"]
                )
            continue
        data[key] = value
    return data, picture


def parse_model(model: Type[M], data: dict[str, Any]) -> M:
    """
    Validate ``data`` into ``model``, reporting failures as a 400.

    Raises:
        ValidationError: With one message per invalid field
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" if err["loc"] else err["msg"]
            for err in e.errors()
        ]
        raise ValidationError("Validation failed", errors=errors)
