from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from PIL import Image, UnidentifiedImageError
from werkzeug.datastructures import FileStorage

from .exceptions import ValidationError

ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "bmp", "webp"}
MAX_PICTURE_KB = 2048
MAX_STRING_LENGTH = 255

REQUIRED_MESSAGES = {
    "name": "Recipe name is required.",
    "cuisine_type": "Cuisine type is required.",
    "ingredients": "Ingredients are required.",
    "steps": "Cooking steps are required.",
}
LENGTH_LIMITED = {"name": "name", "cuisine_type": "cuisine type"}


def validate_recipe(
    form: Mapping[str, Any],
    files: Optional[Mapping[str, FileStorage]] = None,
    *,
    max_picture_kb: int = MAX_PICTURE_KB,
) -> Dict[str, Any]:
    """Check submitted recipe fields and return the cleaned values.

    Raises :class:`ValidationError` with one message per failing field. The
    picture is optional; an empty file input counts as no picture.
    """

    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}

    for field, message in REQUIRED_MESSAGES.items():
        value = form.get(field)
        value = value.strip() if isinstance(value, str) else ""
        if not value:
            errors[field] = message
            continue
        if field in LENGTH_LIMITED and len(value) > MAX_STRING_LENGTH:
            errors[field] = (
                f"The {LENGTH_LIMITED[field]} may not be greater than "
                f"{MAX_STRING_LENGTH} characters."
            )
            continue
        cleaned[field] = value

    picture = (files or {}).get("picture")
    if picture is not None and picture.filename:
        error = _picture_error(picture, max_picture_kb)
        if error:
            errors["picture"] = error
        else:
            cleaned["picture"] = picture
    else:
        cleaned["picture"] = None

    if errors:
        raise ValidationError(errors)
    return cleaned


def _picture_error(picture: FileStorage, max_picture_kb: int) -> Optional[str]:
    if not _allowed_image(picture.filename) or not _is_image(picture):
        return "The file must be an image."
    if _size_of(picture) > max_picture_kb * 1024:
        return f"The image must not be larger than {_format_size(max_picture_kb)}."
    return None


def _format_size(kb: int) -> str:
    if kb % 1024 == 0:
        return f"{kb // 1024}MB"
    return f"{kb}KB"


def _allowed_image(filename: Optional[str]) -> bool:
    if not filename or "." not in filename:
        return False
    ext = filename.rsplit(".", 1)[1].lower()
    return ext in ALLOWED_IMAGE_EXTENSIONS


def _is_image(picture: FileStorage) -> bool:
    stream = picture.stream
    try:
        stream.seek(0)
        with Image.open(stream) as image:
            image.verify()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ):
        return False
    finally:
        stream.seek(0)
    return True


def _size_of(picture: FileStorage) -> int:
    stream = picture.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


__all__ = ["ALLOWED_IMAGE_EXTENSIONS", "MAX_PICTURE_KB", "validate_recipe"]
