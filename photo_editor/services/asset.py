# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Copies generated images from provider URLs into owned storage.

Provider output URLs expire, so the reconciler never stores them on a task.
"""

import logging
from typing import Optional, Tuple

import httpx

from photo_editor.core.config import settings
from photo_editor.services.storage import (
    StorageBackend,
    StorageError,
    generate_asset_key,
    get_storage_backend,
)

logger = logging.getLogger(__name__)

_CONTENT_TYPE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}

DEFAULT_CONTENT_TYPE = "image/png"


class AssetPersistenceError(Exception):
    """The provider output could not be downloaded or stored"""


def extension_for(content_type: Optional[str]) -> str:
    if not content_type:
        return "png"
    return _CONTENT_TYPE_EXTENSIONS.get(content_type.split(";")[0].strip().lower(), "png")


class AssetPersister:
    """Downloads a provider output and uploads it to the storage backend"""

    def __init__(
        self,
        storage: Optional[StorageBackend] = None,
        folder: Optional[str] = None,
        timeout: Optional[float] = None,
        max_size_mb: Optional[int] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self._storage = storage
        self._client = http_client
        self.folder = folder or settings.STORAGE_FOLDER
        self.timeout = timeout or settings.ASSET_DOWNLOAD_TIMEOUT
        self.max_bytes = (max_size_mb or settings.ASSET_MAX_DOWNLOAD_SIZE_MB) * 1024 * 1024

    @property
    def storage(self) -> StorageBackend:
        return self._storage or get_storage_backend()

    def _stream(self, client: httpx.Client, url: str) -> Tuple[bytes, str]:
        chunks = []
        received = 0
        with client.stream("GET", url) as response:
            if not response.is_success:
                raise AssetPersistenceError(
                    f"Failed to download image: HTTP {response.status_code}"
                )
            content_type = response.headers.get("content-type", DEFAULT_CONTENT_TYPE)
            for chunk in response.iter_bytes():
                received += len(chunk)
                if received > self.max_bytes:
                    raise AssetPersistenceError(
                        f"Image exceeds the maximum size of "
                        f"{self.max_bytes // (1024 * 1024)} MB"
                    )
                chunks.append(chunk)
        return b"".join(chunks), content_type

    def download(self, url: str) -> Tuple[bytes, str]:
        """Fetch url and return (data, content_type)"""
        try:
            if self._client is not None:
                data, content_type = self._stream(self._client, url)
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                    data, content_type = self._stream(client, url)
        except httpx.HTTPError as e:
            raise AssetPersistenceError(f"Failed to download image: {e}") from e

        if not data:
            raise AssetPersistenceError("Downloaded image is empty")
        return data, content_type

    def persist(self, source_url: str) -> str:
        """
        Copy the image at source_url into storage and return its owned URL.

        Raises:
            AssetPersistenceError: download or upload failed
        """
        data, content_type = self.download(source_url)
        key = generate_asset_key(self.folder, extension_for(content_type))
        try:
            url = self.storage.save(key, data, content_type.split(";")[0].strip())
        except StorageError as e:
            raise AssetPersistenceError(f"Failed to upload image: {e.message}") from e

        logger.info(f"[Asset] Stored generated image {key} ({len(data)} bytes)")
        return url


asset_persister = AssetPersister()
