# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Local filesystem storage backend.

Objects are written below a base directory and served from a public base URL,
by default the /uploads static mount of this application.
"""

import logging
import os
from pathlib import Path

from photo_editor.services.storage.storage_backend import StorageBackend, StorageError

logger = logging.getLogger(__name__)


class LocalStorageBackend(StorageBackend):
    """Stores assets as files under base_dir"""

    BACKEND_TYPE = "local"

    def __init__(self, base_dir: str, public_base_url: str):
        self.base_dir = Path(base_dir).resolve()
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def backend_type(self) -> str:
        return self.BACKEND_TYPE

    def _path_for(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        if self.base_dir not in path.parents:
            raise StorageError(f"Invalid storage key: {key}", key)
        return path

    def save(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_name(path.name + ".tmp")
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error(f"Failed to save asset {key}: {e}")
            raise StorageError(f"Failed to save asset: {e}", key) from e

        logger.info(f"Saved asset {key} ({len(data)} bytes, {content_type})")
        return self.get_url(key)

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Deleted asset {key}")
        return True

    def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()

    def get_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key.lstrip('/')}"
