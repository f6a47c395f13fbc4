# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Storage backend factory for creating storage backend instances.

This module provides a registry-based factory for storage backends,
allowing deployments to register custom storage implementations
without modifying the core codebase.

Usage:
    from photo_editor.services.storage import register_storage_backend

    register_storage_backend("gcs", lambda: MyGCSStorageBackend(...))

    # The backend will be used when configured:
    # STORAGE_BACKEND=gcs
"""

import logging
from typing import Callable, Dict, List, Optional

from photo_editor.core.config import settings
from photo_editor.services.storage.storage_backend import StorageBackend

logger = logging.getLogger(__name__)

# Type alias for storage backend factory function
StorageBackendFactory = Callable[[], StorageBackend]


def _create_local_backend() -> StorageBackend:
    from photo_editor.services.storage.local_storage import LocalStorageBackend

    return LocalStorageBackend(
        base_dir=settings.STORAGE_LOCAL_DIR,
        public_base_url=settings.STORAGE_PUBLIC_BASE_URL,
    )


def _create_s3_backend() -> StorageBackend:
    from photo_editor.services.storage.s3_storage import S3Config, S3StorageBackend

    return S3StorageBackend(S3Config.from_settings())


class StorageBackendRegistry:
    """
    Registry for storage backend factories.

    This singleton class manages the registration and retrieval of
    storage backend factories.
    """

    _instance: Optional["StorageBackendRegistry"] = None
    _initialized: bool = False

    def __new__(cls) -> "StorageBackendRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        # Only initialize once (singleton pattern)
        if StorageBackendRegistry._initialized:
            return
        StorageBackendRegistry._initialized = True
        self._backends: Dict[str, StorageBackendFactory] = {}
        self._default_backend: str = "local"
        self.register("local", _create_local_backend)
        self.register("s3", _create_s3_backend)
        self.register("minio", _create_s3_backend)

    def register(
        self,
        backend_type: str,
        factory: StorageBackendFactory,
        override: bool = False,
    ) -> None:
        """
        Register a storage backend factory.

        Raises:
            ValueError: If backend_type is already registered and override is False
        """
        backend_type = backend_type.lower()

        if backend_type in self._backends and not override:
            raise ValueError(
                f"Storage backend '{backend_type}' is already registered. "
                f"Use override=True to replace it."
            )

        self._backends[backend_type] = factory
        logger.info(f"Registered storage backend: {backend_type}")

    def unregister(self, backend_type: str) -> bool:
        backend_type = backend_type.lower()

        if backend_type == self._default_backend:
            logger.warning(
                f"Cannot unregister the default backend '{self._default_backend}'"
            )
            return False

        if backend_type in self._backends:
            del self._backends[backend_type]
            logger.info(f"Unregistered storage backend: {backend_type}")
            return True

        return False

    def get(self, backend_type: str) -> StorageBackend:
        """
        Get a storage backend instance.

        Raises:
            ValueError: If backend_type is not registered
        """
        backend_type = backend_type.lower()

        if backend_type not in self._backends:
            raise ValueError(
                f"Unknown storage backend: '{backend_type}'. "
                f"Available backends: {', '.join(self.list_backends())}"
            )

        return self._backends[backend_type]()

    def list_backends(self) -> List[str]:
        return list(self._backends.keys())


# Global registry instance
_registry = StorageBackendRegistry()
_backend_instance: Optional[StorageBackend] = None


def register_storage_backend(
    backend_type: str,
    factory: StorageBackendFactory,
    override: bool = False,
) -> None:
    _registry.register(backend_type, factory, override)


def get_storage_backend() -> StorageBackend:
    """
    Get the configured storage backend instance.

    The instance is created on first use from STORAGE_BACKEND and reused
    afterwards.
    """
    global _backend_instance
    if _backend_instance is None:
        _backend_instance = _registry.get(settings.STORAGE_BACKEND)
        logger.info(f"Using storage backend: {_backend_instance.backend_type}")
    return _backend_instance


def set_storage_backend(backend: Optional[StorageBackend]) -> None:
    """Replace the cached backend instance; None resets to the configured one"""
    global _backend_instance
    _backend_instance = backend
