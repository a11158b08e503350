"""MinIO implementation of the avatar object store."""

import asyncio
import io
from functools import lru_cache

import structlog
from minio import Minio
from minio.error import S3Error
from urllib3.exceptions import HTTPError

from warden.core.config.settings import settings
from warden.core.exceptions import FileUploadError
from warden.domain.interfaces.error_tracking import IErrorTracker
from warden.domain.interfaces.storage import IObjectStorage

logger = structlog.get_logger(__name__)

_MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchObject", "ResourceNotFound"}


@lru_cache
def get_minio_client() -> Minio:
    """Return a cached MinIO client configured from settings."""
    return Minio(
        settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY.get_secret_value(),
        secure=settings.MINIO_SECURE,
    )


class MinioStorage(IObjectStorage):
    """Stores objects in one bucket; the minio client is blocking, so calls run in a thread."""

    def __init__(self, client: Minio, bucket: str, public_url: str, error_tracker: IErrorTracker):
        self.client = client
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")
        self.error_tracker = error_tracker

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        try:
            await asyncio.to_thread(
                self.client.put_object,
                self.bucket,
                key,
                io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except (S3Error, HTTPError) as e:
            logger.error("Object upload failed", key=key, error=str(e))
            self.error_tracker.capture_exception(e, operation="upload", key=key)
            raise FileUploadError() from e
        logger.info("Object uploaded", key=key, size=len(data))
        return f"{self.public_url}/{key}"

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self.client.remove_object, self.bucket, key)
        except S3Error as e:
            if e.code in _MISSING_OBJECT_CODES:
                return
            logger.error("Object removal failed", key=key, error=str(e))
            self.error_tracker.capture_exception(e, operation="delete", key=key)
            raise FileUploadError() from e
        except HTTPError as e:
            self.error_tracker.capture_exception(e, operation="delete", key=key)
            raise FileUploadError() from e
