from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Mapping, Optional

from google.api_core import exceptions as gcloud_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage
from werkzeug.datastructures import FileStorage

from .exceptions import StorageError
from .storage import PICTURE_DIRECTORY, ImageStorage, build_image_name

logger = logging.getLogger(__name__)

SIGNED_URL_EXPIRATION = timedelta(days=7)


class GCSImageStorage(ImageStorage):
    """Recipe pictures kept in a Google Cloud Storage bucket."""

    def __init__(
        self,
        *,
        bucket_name: Optional[str] = None,
        project: Optional[str] = None,
        bucket: Any = None,
    ) -> None:
        if bucket is None:
            if not bucket_name:
                raise StorageError("A Cloud Storage bucket must be configured to store pictures.")
            client = storage.Client(project=project)
            bucket = client.bucket(bucket_name)
        self._bucket = bucket

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "GCSImageStorage":
        """Build a storage instance from Flask configuration values."""

        return cls(bucket_name=config.get("GCS_BUCKET"), project=config.get("GCP_PROJECT"))

    def store(self, image: FileStorage, directory: str = PICTURE_DIRECTORY) -> str:
        blob_name = build_image_name(image.filename, directory)
        blob = self._bucket.blob(blob_name)

        try:
            image.stream.seek(0)
            blob.upload_from_file(image.stream, content_type=image.mimetype)
        except gcloud_exceptions.GoogleAPICallError as exc:
            raise StorageError(f"Could not upload picture '{blob_name}': {exc}") from exc

        logger.debug("Uploaded picture %s", blob_name)
        return blob_name

    def delete(self, path: str) -> bool:
        blob = self._bucket.blob(path)

        try:
            blob.delete()
        except gcloud_exceptions.NotFound:
            # The blob may already have been removed manually.
            return False
        except Exception as exc:
            # API, auth and transport failures all surface as StorageError.
            raise StorageError(f"Could not delete picture '{path}': {exc}") from exc

        logger.debug("Deleted picture %s", path)
        return True

    def exists(self, path: str) -> bool:
        return bool(self._bucket.blob(path).exists())

    def url(self, path: str) -> str:
        blob = self._bucket.blob(path)
        try:
            return blob.generate_signed_url(
                version="v4", method="GET", expiration=SIGNED_URL_EXPIRATION
            )
        except (ValueError, TypeError, AttributeError, auth_exceptions.GoogleAuthError):
            # Signing needs credentials that can sign; fall back to the public URL.
            return blob.public_url


__all__ = ["GCSImageStorage"]
