# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Generated asset storage.
"""

from photo_editor.services.storage.storage_backend import (
    StorageBackend,
    StorageError,
    generate_asset_key,
)
from photo_editor.services.storage.storage_factory import (
    get_storage_backend,
    register_storage_backend,
    set_storage_backend,
)

__all__ = [
    "StorageBackend",
    "StorageError",
    "generate_asset_key",
    "get_storage_backend",
    "register_storage_backend",
    "set_storage_backend",
]
