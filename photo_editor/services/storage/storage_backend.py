# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Storage backend abstract interface for generated assets.

Generated images are copied out of the provider's temporary URLs into
storage owned by this service. Backends return the public URL of each stored
object; that URL is what tasks expose as output_image_url.
"""

import logging
import time
import uuid
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)

GENERATED_FILENAME_PREFIX = "ai-generated"


class StorageBackend(ABC):
    """
    Abstract base class for asset storage backends.

    Different storage backends (local disk, S3, MinIO, etc.) implement this
    interface so the asset persister never depends on a concrete backend.
    """

    @abstractmethod
    def save(self, key: str, data: bytes, content_type: str) -> str:
        """
        Save binary data under the given key.

        Args:
            key: Storage key (format: {folder}/{filename})
            data: File binary data
            content_type: MIME type of the data

        Returns:
            Public URL of the stored object

        Raises:
            StorageError: If save operation fails
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete an object.

        Returns:
            True if deleted successfully, False otherwise
        """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if an object exists"""

    @abstractmethod
    def get_url(self, key: str) -> str:
        """Public URL of the object stored under key"""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """
        Get the backend type identifier.

        Returns:
            Backend type string (e.g., "local", "s3")
        """


class StorageError(Exception):
    """Exception raised when storage operations fail."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.message = message
        self.key = key
        super().__init__(self.message)


def generate_asset_key(folder: str, extension: str = "png") -> str:
    """
    Generate a unique storage key for a generated image.

    The key format is: {folder}/ai-generated-{timestamp_ms}-{uuid}.{extension}
    """
    timestamp = int(time.time() * 1000)
    unique_id = uuid.uuid4().hex[:8]
    folder = folder.strip("/")
    filename = f"{GENERATED_FILENAME_PREFIX}-{timestamp}-{unique_id}.{extension}"
    return f"{folder}/{filename}" if folder else filename
