"""
Object storage (MinIO / S3) settings for user avatars.
"""
from pydantic import SecretStr
from pydantic_settings import BaseSettings


class StorageSettings(BaseSettings):
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: SecretStr = SecretStr("minioadmin")
    MINIO_BUCKET: str = "warden"
    MINIO_SECURE: bool = False
    MINIO_PUBLIC_URL: str = ""

    @property
    def storage_public_url(self) -> str:
        """Base URL under which uploaded objects are served."""
        if self.MINIO_PUBLIC_URL:
            return self.MINIO_PUBLIC_URL.rstrip("/")
        scheme = "https" if self.MINIO_SECURE else "http"
        return f"{scheme}://{self.MINIO_ENDPOINT}/{self.MINIO_BUCKET}"
