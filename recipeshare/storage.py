from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Protocol

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from .exceptions import StorageError

logger = logging.getLogger(__name__)

PICTURE_DIRECTORY = "recipes"


class ImageStorage(Protocol):
    """Protocol describing where uploaded recipe pictures live."""

    def store(self, image: FileStorage, directory: str = PICTURE_DIRECTORY) -> str:
        """Persist ``image`` and return its path relative to the storage root."""

    def delete(self, path: str) -> bool:
        """Remove a stored file. Returns ``False`` when nothing was there."""

    def exists(self, path: str) -> bool:
        """Return whether ``path`` currently resolves to a stored file."""

    def url(self, path: str) -> str:
        """Return a URL a browser can use to fetch ``path``."""


def build_image_name(filename: str | None, directory: str = PICTURE_DIRECTORY) -> str:
    safe = secure_filename(filename or "") or "picture"
    unique = uuid.uuid4().hex
    return f"{directory}/{unique}_{safe}"


class LocalImageStorage(ImageStorage):
    """Stores pictures below a public directory on the local filesystem."""

    def __init__(self, root: str | Path, *, url_prefix: str = "/storage") -> None:
        self._root = Path(root).resolve()
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def store(self, image: FileStorage, directory: str = PICTURE_DIRECTORY) -> str:
        relative = build_image_name(image.filename, directory)
        target = self._resolve(relative)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            image.stream.seek(0)
            image.save(str(target))
        except OSError as exc:
            raise StorageError(f"Could not store picture '{relative}': {exc}") from exc

        logger.debug("Stored picture %s", relative)
        return relative

    def delete(self, path: str) -> bool:
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError:
            # Already gone; the caller only cares that it no longer resolves.
            return False
        except OSError as exc:
            raise StorageError(f"Could not delete picture '{path}': {exc}") from exc

        logger.debug("Deleted picture %s", path)
        return True

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except StorageError:
            return False

    def url(self, path: str) -> str:
        return f"{self._url_prefix}/{path.lstrip('/')}"

    def _resolve(self, path: str) -> Path:
        target = (self._root / path).resolve()
        if self._root not in target.parents:
            raise StorageError(f"Path '{path}' escapes the storage root.")
        return target


__all__ = ["ImageStorage", "LocalImageStorage", "PICTURE_DIRECTORY", "build_image_name"]
