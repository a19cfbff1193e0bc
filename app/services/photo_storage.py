"""Photo storage backed by an S3-compatible bucket (MinIO client)."""
import logging
import secrets
import time
from dataclasses import dataclass
from datetime import timedelta
from pathlib import PurePosixPath

from minio import Minio
from minio.error import S3Error

from app.core.config import settings
from app.core.exceptions import InvalidArgumentError, StorageError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "jpg"


def unique_object_name(filename: str) -> str:
    """``audit-<epoch millis>-<random suffix>.<ext>``; the extension comes from ``filename``."""
    extension = PurePosixPath(filename).suffix.lstrip(".").lower() or DEFAULT_EXTENSION
    return f"audit-{int(time.time() * 1000)}-{secrets.token_hex(4)}.{extension}"


@dataclass
class UploadTarget:
    upload_url: str
    file_url: str
    object_name: str


class PhotoStorage:
    """
    Hands out presigned upload URLs and removes photos.

    The upload itself goes straight from the client to the bucket.
    """

    def __init__(self, client: Minio = None, bucket: str = None):
        self.client = client or Minio(
            settings.PHOTO_STORAGE_ENDPOINT,
            access_key=settings.PHOTO_STORAGE_ACCESS_KEY,
            secret_key=settings.PHOTO_STORAGE_SECRET_KEY,
            secure=settings.PHOTO_STORAGE_SECURE,
            region=settings.PHOTO_STORAGE_REGION,
        )
        self.bucket = bucket or settings.PHOTO_STORAGE_BUCKET

    def public_url(self, object_name: str) -> str:
        """Stable read URL for an object in the public bucket."""
        return f"{settings.photo_public_base_url}/{object_name}"

    def create_upload_target(self, filename: str) -> UploadTarget:
        """Presigned PUT URL for a fresh, unique object name plus its public URL."""
        object_name = unique_object_name(filename)
        try:
            upload_url = self.client.presigned_put_object(
                self.bucket,
                object_name,
                expires=timedelta(seconds=settings.PHOTO_UPLOAD_URL_TTL_SECONDS),
            )
        except S3Error as e:
            raise StorageError(f"Failed to generate upload URL: {e}")

        logger.info(f"Issued photo upload URL for {object_name}")
        return UploadTarget(
            upload_url=upload_url,
            file_url=self.public_url(object_name),
            object_name=object_name,
        )

    def delete_photo(self, object_name: str) -> None:
        """
        Raises:
            InvalidArgumentError: If the name is not a plain object name
            StorageError: If the bucket rejects the removal
        """
        if not object_name or "/" in object_name or object_name in (".", ".."):
            raise InvalidArgumentError("invalid photo name")
        try:
            self.client.remove_object(self.bucket, object_name)
        except S3Error as e:
            raise StorageError(f"Failed to delete photo: {e}")

        logger.info(f"Deleted photo {object_name}")


def get_photo_storage() -> PhotoStorage:
    """Dependency for the photo store (overridden in tests)."""
    return PhotoStorage()
