"""
S3 object store for product images

Uploads one file per call and returns its public URL. Any failure (S3 error,
missing location) surfaces as UploadFailureError so the caller can skip the
metadata write.
"""

import asyncio
import logging
import mimetypes
import os
import time
from typing import Optional
from urllib.parse import quote

from botocore.exceptions import BotoCoreError, ClientError

from storefront.core.exceptions import UploadFailureError, ValidationError

logger = logging.getLogger(__name__)


class ObjectStore:
    """One S3 bucket with a key prefix."""

    def __init__(
        self,
        s3_client,
        bucket: str,
        region: str,
        key_prefix: str = "",
        max_size_bytes: Optional[int] = None,
        endpoint_url: Optional[str] = None,
    ):
        self.s3_client = s3_client
        self.bucket = bucket
        self.region = region
        self.key_prefix = key_prefix
        self.max_size_bytes = max_size_bytes
        self.endpoint_url = endpoint_url

    def build_key(self, filename: str) -> str:
        """products/1718000000000_photo.jpg style keys, as the bucket has always used."""
        safe_name = os.path.basename(filename or "upload").replace(" ", "_")
        return f"{self.key_prefix}{int(time.time() * 1000)}_{safe_name}"

    def public_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{quote(key)}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quote(key)}"

    async def upload(self, data: bytes, filename: str, content_type: Optional[str] = None) -> str:
        """
        Store a file and return its URL.

        Raises:
            ValidationError: file is empty or over the size limit
            UploadFailureError: S3 rejected the write
        """
        if not data:
            raise ValidationError("Image file is empty.")
        if self.max_size_bytes and len(data) > self.max_size_bytes:
            raise ValidationError(
                f"Image exceeds maximum size of {self.max_size_bytes // (1024 * 1024)}MB."
            )

        key = self.build_key(filename)
        content_type = content_type or mimetypes.guess_type(filename or "")[0] or "application/octet-stream"

        try:
            await asyncio.to_thread(
                self.s3_client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload failed for {self.bucket}/{key}: {e}")
            raise UploadFailureError(details={"bucket": self.bucket}) from e

        url = self.public_url(key)
        logger.info(f"Uploaded image to {self.bucket}/{key}")
        return url
