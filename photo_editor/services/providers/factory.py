# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Registry-based factory for AI provider services.

Providers are registered by name. The model catalogue decides which provider
runs a model, falling back to AI_DEFAULT_PROVIDER, so call sites never branch
on the provider themselves.

Usage:
    from photo_editor.services.providers import register_ai_service

    register_ai_service("my-provider", lambda: MyProviderService(...))
"""

import logging
from typing import Callable, Dict, List, Optional

from photo_editor.core.ai_models import AIModel
from photo_editor.core.config import settings
from photo_editor.services.providers.base import AIService

logger = logging.getLogger(__name__)

# Type alias for provider factory function
AIServiceFactory = Callable[[], AIService]


def _create_replicate_service() -> AIService:
    from photo_editor.services.providers.replicate import ReplicateService

    return ReplicateService(
        api_token=settings.REPLICATE_API_TOKEN,
        base_url=settings.REPLICATE_API_BASE_URL,
        timeout=settings.AI_PROVIDER_TIMEOUT,
    )


class AIServiceRegistry:
    """
    Registry for AI provider factories.
    """

    def __init__(self):
        self._factories: Dict[str, AIServiceFactory] = {}
        self.register("replicate", _create_replicate_service)

    def register(
        self, name: str, factory: AIServiceFactory, override: bool = False
    ) -> None:
        """
        Register a provider factory.

        Raises:
            ValueError: If name is already registered and override is False
        """
        name = name.lower()
        if name in self._factories and not override:
            raise ValueError(
                f"AI provider '{name}' is already registered. "
                f"Use override=True to replace it."
            )
        self._factories[name] = factory
        logger.info(f"Registered AI provider: {name}")

    def unregister(self, name: str) -> bool:
        return self._factories.pop(name.lower(), None) is not None

    def list_providers(self) -> List[str]:
        return list(self._factories.keys())

    def create(self, name: str) -> AIService:
        """
        Create a provider service instance.

        Raises:
            ValueError: If the provider is not registered
        """
        name = name.lower()
        if name not in self._factories:
            raise ValueError(
                f"Unsupported AI provider: '{name}'. "
                f"Available providers: {', '.join(self.list_providers())}"
            )
        return self._factories[name]()


# Global registry instance
_registry = AIServiceRegistry()


def register_ai_service(
    name: str, factory: AIServiceFactory, override: bool = False
) -> None:
    _registry.register(name, factory, override)


def unregister_ai_service(name: str) -> bool:
    return _registry.unregister(name)


def create_ai_service(provider: Optional[str] = None) -> AIService:
    """Create the named provider, or the configured default provider"""
    return _registry.create(provider or settings.AI_DEFAULT_PROVIDER)


def get_ai_service_for_model(model: AIModel) -> AIService:
    return create_ai_service(model.provider)
