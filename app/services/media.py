# services/media.py
import logging
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaUpload:
    url: str
    duration: Optional[float] = None


class MediaStore(Protocol):
    def store(self, file: UploadFile, folder: str) -> Optional[MediaUpload]: ...


class S3MediaStore:
    """Puts uploaded files in a bucket and hands back their public URL."""

    def __init__(self, bucket: str, region: Optional[str] = None, public_base_url: Optional[str] = None, client=None):
        self.bucket = bucket
        self.region = region
        self.public_base_url = public_base_url
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("s3", region_name=self.region)
        return self._client

    def _url_for(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.region:
            return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    def store(self, file: UploadFile, folder: str) -> Optional[MediaUpload]:
        filename = file.filename or ""
        file_extension = filename.rsplit(".", 1)[-1] if "." in filename else "bin"
        key = f"{folder}/{uuid.uuid4()}.{file_extension}"
        try:
            self.client.upload_fileobj(
                file.file,
                self.bucket,
                key,
                ExtraArgs={"ContentType": file.content_type or "application/octet-stream"},
            )
        except (BotoCoreError, ClientError):
            logger.exception("Upload of %s to bucket %s failed", key, self.bucket)
            return None
        logger.info("Uploaded %s", key)
        # S3 does not probe media; duration stays unknown
        return MediaUpload(url=self._url_for(key))


@lru_cache
def get_media_store() -> S3MediaStore:
    return S3MediaStore(
        bucket=settings.S3_BUCKET_NAME,
        region=settings.AWS_REGION,
        public_base_url=settings.MEDIA_PUBLIC_BASE_URL,
    )
