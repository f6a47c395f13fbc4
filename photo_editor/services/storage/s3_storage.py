# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
S3-compatible storage backend (AWS S3, MinIO, etc.).
"""

import logging
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from photo_editor.core.config import settings
from photo_editor.services.storage.storage_backend import StorageBackend, StorageError

logger = logging.getLogger(__name__)


@dataclass
class S3Config:
    """Configuration for S3-compatible storage."""

    endpoint: str
    bucket: str
    access_key: str
    secret_key: str
    region: str = "us-east-1"
    use_ssl: bool = True
    public_url: str = ""

    @classmethod
    def from_settings(cls) -> "S3Config":
        return cls(
            endpoint=settings.STORAGE_S3_ENDPOINT,
            bucket=settings.STORAGE_S3_BUCKET,
            access_key=settings.STORAGE_S3_ACCESS_KEY,
            secret_key=settings.STORAGE_S3_SECRET_KEY,
            region=settings.STORAGE_S3_REGION,
            use_ssl=settings.STORAGE_S3_USE_SSL,
            public_url=settings.STORAGE_S3_PUBLIC_URL,
        )

    def is_valid(self) -> bool:
        """Check if the configuration has all required fields."""
        return all([self.bucket, self.access_key, self.secret_key])


class S3StorageBackend(StorageBackend):
    """Stores assets as objects in an S3-compatible bucket"""

    BACKEND_TYPE = "s3"

    def __init__(self, config: S3Config, client=None):
        if not config.is_valid():
            raise StorageError(
                "S3 storage requires STORAGE_S3_BUCKET, STORAGE_S3_ACCESS_KEY "
                "and STORAGE_S3_SECRET_KEY"
            )
        self.config = config
        self._client = client

    @property
    def backend_type(self) -> str:
        return self.BACKEND_TYPE

    def _get_client(self):
        """Get or create boto3 S3 client (lazy initialization)."""
        if self._client is None:
            boto_config = BotoConfig(
                signature_version="s3v4",
                retries={"max_attempts": 3, "mode": "standard"},
            )
            self._client = boto3.client(
                "s3",
                endpoint_url=self.config.endpoint or None,
                aws_access_key_id=self.config.access_key,
                aws_secret_access_key=self.config.secret_key,
                region_name=self.config.region,
                use_ssl=self.config.use_ssl,
                config=boto_config,
            )
            logger.debug(f"Initialized S3 client for endpoint: {self.config.endpoint}")
        return self._client

    def save(self, key: str, data: bytes, content_type: str) -> str:
        try:
            self._get_client().put_object(
                Bucket=self.config.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload asset to S3 ({key}): {e}")
            raise StorageError(f"Failed to upload asset to S3: {e}", key) from e

        logger.info(f"Uploaded asset to S3: {key} ({len(data)} bytes)")
        return self.get_url(key)

    def delete(self, key: str) -> bool:
        try:
            self._get_client().delete_object(Bucket=self.config.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete object from S3 ({key}): {e}")
            return False
        logger.info(f"Deleted object from S3: {key}")
        return True

    def exists(self, key: str) -> bool:
        try:
            self._get_client().head_object(Bucket=self.config.bucket, Key=key)
            return True
        except ClientError:
            return False

    def get_url(self, key: str) -> str:
        base: Optional[str] = self.config.public_url
        if not base:
            endpoint = self.config.endpoint or (
                f"https://s3.{self.config.region}.amazonaws.com"
            )
            base = f"{endpoint.rstrip('/')}/{self.config.bucket}"
        return f"{base.rstrip('/')}/{key}"
